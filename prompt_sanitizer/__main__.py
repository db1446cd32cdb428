import sys

from prompt_sanitizer.cli import main

sys.exit(main())

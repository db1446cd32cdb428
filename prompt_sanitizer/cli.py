"""
Command-line interface for the prompt sanitizer.

Reads text from files (or stdin), cleans it and prints it or writes
<stem>_cleaned.txt files.
"""

import argparse
import sys
from pathlib import Path

from prompt_sanitizer.config import DEFAULT_MAX_LENGTH, DEFAULT_MIN_WORDS
from prompt_sanitizer.diagnostics import analyze_impact, debug_steps
from prompt_sanitizer.logging_config import close_debug_log, error, info
from prompt_sanitizer.options import SanitizerOptions
from prompt_sanitizer.sanitization import ContentSanitizer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="prompt-sanitizer",
        description="Prompt Sanitizer - Clean extracted text for use in LLM prompts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Clean a file and print the result
  prompt-sanitizer --input article.txt

  # Clean several files into a directory
  prompt-sanitizer --input page1.txt page2.txt --output-dir ./cleaned

  # Pipe text through, with a summary of what was removed
  cat selection.txt | prompt-sanitizer --stats

  # Show the text after every stage
  prompt-sanitizer --input formula.txt --debug-steps

  # Debug mode (verbose logging)
  DEBUG=true prompt-sanitizer --input article.txt
        """
    )

    parser.add_argument(
        '--input',
        nargs='+',
        help='Input text file(s) to clean (default: read stdin)'
    )
    parser.add_argument(
        '--output-dir',
        help='Write <name>_cleaned.txt files here instead of printing'
    )
    parser.add_argument(
        '--max-length',
        type=int,
        default=DEFAULT_MAX_LENGTH,
        help=f'Maximum length of the cleaned text (default: {DEFAULT_MAX_LENGTH})'
    )
    parser.add_argument(
        '--min-words',
        type=int,
        default=DEFAULT_MIN_WORDS,
        help=f'Words required before falling back to the original (default: {DEFAULT_MIN_WORDS})'
    )
    parser.add_argument(
        '--aggressive-unicode',
        action='store_true',
        help='Transliterate to ASCII and drop all other characters'
    )
    parser.add_argument(
        '--preserve-equations',
        action='store_true',
        help='Keep Unicode math symbols instead of spelling them out'
    )
    parser.add_argument(
        '--no-repair-encoding',
        action='store_true',
        help='Skip mojibake repair'
    )
    parser.add_argument(
        '--silent',
        action='store_true',
        help='Do not log fallback warnings'
    )
    parser.add_argument(
        '--stats',
        action='store_true',
        help='Print a summary of what cleaning removed (to stderr)'
    )
    parser.add_argument(
        '--debug-steps',
        action='store_true',
        help='Print the text after every stage instead of the result'
    )
    return parser


def _print_stats(name: str, original: str, cleaned: str, used_fallback: bool):
    stats = analyze_impact(original, cleaned)
    status = '[FALLBACK]' if used_fallback else '[OK]'
    print(f"{status} {name}", file=sys.stderr)
    print(f"  Length: {stats['original']['length']} -> {stats['cleaned']['length']} "
          f"({stats['removed']['percentage']}% removed)", file=sys.stderr)
    print(f"  Words: {stats['original']['words']} -> {stats['cleaned']['words']}", file=sys.stderr)
    placeholders = ', '.join(f"{k}={v}" for k, v in stats['placeholders'].items())
    print(f"  Placeholders: {placeholders}", file=sys.stderr)


def _read_sources(paths: list[str] | None) -> tuple[list[tuple[str, str]], int]:
    """Return (name, text) pairs and the number of unreadable files."""
    if not paths:
        return [('<stdin>', sys.stdin.read())], 0

    sources = []
    failures = 0
    for path in paths:
        try:
            text = Path(path).read_text(encoding='utf-8', errors='replace')
        except OSError as e:
            error(f"[CLI] Cannot read {path}: {e}")
            failures += 1
            continue
        sources.append((path, text))
    return sources, failures


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    try:
        options = SanitizerOptions(
            max_length=args.max_length,
            min_words=args.min_words,
            aggressive_unicode=args.aggressive_unicode,
            preserve_equations=args.preserve_equations,
            silent=args.silent,
            repair_encoding=not args.no_repair_encoding,
        )
    except ValueError as e:
        error(f"[CLI] {e}")
        print(f"error: {e}", file=sys.stderr)
        return 2

    try:
        return _run(args, options)
    finally:
        close_debug_log()


def _run(args: argparse.Namespace, options: SanitizerOptions) -> int:
    sources, failures = _read_sources(args.input)

    output_dir = None
    if args.output_dir:
        output_dir = Path(args.output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)

    sanitizer = ContentSanitizer(options)
    for name, text in sources:
        if args.debug_steps:
            for stage_name, snapshot in debug_steps(text, options).items():
                print(f"===== {stage_name} =====")
                print(snapshot)
            continue

        result = sanitizer.sanitize_with_report(text)

        if output_dir is not None:
            stem = Path(name).stem if name != '<stdin>' else 'stdin'
            output_path = output_dir / f"{stem}_cleaned.txt"
            output_path.write_text(result.text, encoding='utf-8')
            info(f"[CLI] Saved cleaned text to: {output_path}")
        else:
            print(result.text)

        if args.stats:
            _print_stats(name, text, result.text, result.used_fallback)

    return 1 if failures else 0


if __name__ == '__main__':
    sys.exit(main())

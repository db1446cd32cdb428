"""
Prompt Sanitizer Configuration Module
Centralized configuration for the sanitization pipeline.
"""

import os
from pathlib import Path

import yaml

# Debug Mode Configuration
DEBUG_MODE = os.environ.get('DEBUG', 'false').lower() == 'true'

# Logging
APP_NAME = "PromptSanitizer"
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"

# Log files are opt-in: a library must not write to disk unless asked to
_log_file_env = os.environ.get('PROMPT_SANITIZER_LOG_FILE')
LOG_FILE = Path(_log_file_env) if _log_file_env else None
_debug_log_env = os.environ.get('PROMPT_SANITIZER_DEBUG_LOG')
DEBUG_LOG_FILE = Path(_debug_log_env) if _debug_log_env else None

# Public function defaults
DEFAULT_MAX_LENGTH = 5000
DEFAULT_MIN_WORDS = 10

# Validation Settings
# Cleaned text shorter than this (after trimming) is rejected
MIN_CLEANED_CHARS = 50
# Placeholder/word ratio above which an accepted result carries a warning
PLACEHOLDER_WARNING_RATIO = 0.5

# Length Capping Settings
# Cut at the last sentence/line boundary only if it lies beyond this fraction
TRUNCATION_BOUNDARY_RATIO = 0.8
TRUNCATION_ELLIPSIS = "..."

# Excerpt Settings
EXCERPT_MAX_LENGTH = 240
EXCERPT_MIN_CUT_RATIO = 0.5

# --- Heuristics Configuration System ---
# Empirically tuned thresholds for the LaTeX line filter and the
# equation-fragment cleaner. Recalibrate only against a regression corpus.
_heuristics_env = os.environ.get('PROMPT_SANITIZER_HEURISTICS')
HEURISTICS_CONFIG_FILE = (
    Path(_heuristics_env) if _heuristics_env
    else Path(__file__).parent / "data" / "heuristics.yaml"
)
HEURISTICS_CONFIG: dict = {}
_heuristics_loaded = False


def load_heuristics_config(path: Path | None = None) -> dict:
    """
    Load heuristic thresholds from YAML.

    Missing or malformed files leave the configuration empty, in which case
    every consumer falls back to its built-in defaults.

    Args:
        path: Optional override of HEURISTICS_CONFIG_FILE (used by tests).

    Returns:
        The loaded configuration dictionary (possibly empty).
    """
    global HEURISTICS_CONFIG, _heuristics_loaded
    config_path = Path(path) if path else HEURISTICS_CONFIG_FILE
    try:
        with open(config_path, encoding='utf-8') as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ValueError(f"expected a mapping at top level, got {type(data).__name__}")
        HEURISTICS_CONFIG = data
        if DEBUG_MODE:
            from prompt_sanitizer.logging_config import debug_log
            debug_log(f"[CONFIG] Loaded {len(HEURISTICS_CONFIG)} heuristic sections from {config_path}")
    except FileNotFoundError:
        if DEBUG_MODE:
            from prompt_sanitizer.logging_config import debug_log
            debug_log(f"[CONFIG] WARNING: Heuristics file not found at {config_path}. Using defaults.")
        HEURISTICS_CONFIG = {}
    except Exception as e:
        from prompt_sanitizer.logging_config import debug_log
        debug_log(f"[CONFIG] ERROR: Failed to load or parse heuristics file: {e}")
        HEURISTICS_CONFIG = {}
    _heuristics_loaded = True
    return HEURISTICS_CONFIG


def get_heuristics_section(name: str) -> dict:
    """
    Return one section of the heuristics configuration.

    Args:
        name: Section name (e.g. 'equation_fragments').

    Returns:
        A copy of the section mapping, or an empty dict when absent.
    """
    if not _heuristics_loaded:
        load_heuristics_config()
    section = HEURISTICS_CONFIG.get(name) or {}
    if not isinstance(section, dict):
        return {}
    return dict(section)
# --- End Heuristics Configuration System ---

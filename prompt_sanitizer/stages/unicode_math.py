"""
Unicode Math Normalizer Stage

Rewrites typeset mathematics into plain tokens a model reads reliably:

- Mathematical alphanumerics (U+1D400-U+1D7FF), italic small h and Latin
  ligatures fold to plain letters via NFKC
- Superscript runs become '^' + ASCII (x² -> x^2, 10⁻³⁴ -> 10^-34)
- Subscript runs become '_' + ASCII (H₂O -> H_2O, Kₑq -> K_eq)
- Greek letters become their English names (α -> alpha, Ω -> Omega)
- Operators, relations, arrows and set symbols become words or ASCII
  (∑ -> sum, ≤ -> <=, ∈ -> in)

Word-like replacements glued to a letter or digit are padded with spaces,
so "Gμν" becomes "G mu nu" rather than "Gmunu". The middle dot, '×' and
friends that survive here are handled by the equation-fragment stage.

Skipped entirely when SanitizerOptions.preserve_equations is set.
"""

import re
import unicodedata

from prompt_sanitizer.stages.base import BaseStage, StageResult

COMPATIBILITY_PATTERN = re.compile('[\U0001D400-\U0001D7FFℎﬀ-ﬆ]')

SUPERSCRIPTS = {
    '⁰': '0', '¹': '1', '²': '2', '³': '3', '⁴': '4',
    '⁵': '5', '⁶': '6', '⁷': '7', '⁸': '8', '⁹': '9',
    '⁺': '+', '⁻': '-', '⁼': '=', '⁽': '(', '⁾': ')',
    'ⁿ': 'n', 'ⁱ': 'i',
}

SUBSCRIPTS = {
    '₀': '0', '₁': '1', '₂': '2', '₃': '3', '₄': '4',
    '₅': '5', '₆': '6', '₇': '7', '₈': '8', '₉': '9',
    '₊': '+', '₋': '-', '₌': '=', '₍': '(', '₎': ')',
    'ₐ': 'a', 'ₑ': 'e', 'ₒ': 'o', 'ₓ': 'x', 'ₔ': 'e',
    'ₕ': 'h', 'ₖ': 'k', 'ₗ': 'l', 'ₘ': 'm', 'ₙ': 'n',
    'ₚ': 'p', 'ₛ': 's', 'ₜ': 't',
}

GREEK_LETTERS = {
    'α': 'alpha', 'β': 'beta', 'γ': 'gamma', 'δ': 'delta',
    'ε': 'epsilon', 'ζ': 'zeta', 'η': 'eta', 'θ': 'theta',
    'ι': 'iota', 'κ': 'kappa', 'λ': 'lambda', 'μ': 'mu',
    'ν': 'nu', 'ξ': 'xi', 'ο': 'omicron', 'π': 'pi',
    'ρ': 'rho', 'σ': 'sigma', 'ς': 'sigma', 'τ': 'tau',
    'υ': 'upsilon', 'φ': 'phi', 'χ': 'chi', 'ψ': 'psi',
    'ω': 'omega',
    'Α': 'Alpha', 'Β': 'Beta', 'Γ': 'Gamma', 'Δ': 'Delta',
    'Ε': 'Epsilon', 'Ζ': 'Zeta', 'Η': 'Eta', 'Θ': 'Theta',
    'Ι': 'Iota', 'Κ': 'Kappa', 'Λ': 'Lambda', 'Μ': 'Mu',
    'Ν': 'Nu', 'Ξ': 'Xi', 'Ο': 'Omicron', 'Π': 'Pi',
    'Ρ': 'Rho', 'Σ': 'Sigma', 'Τ': 'Tau', 'Υ': 'Upsilon',
    'Φ': 'Phi', 'Χ': 'Chi', 'Ψ': 'Psi', 'Ω': 'Omega',
    # Micro sign and variant forms
    'µ': 'mu', 'ϐ': 'beta', 'ϑ': 'theta', 'ϒ': 'Upsilon',
    'ϕ': 'phi', 'ϖ': 'pi', 'ϰ': 'kappa', 'ϱ': 'rho',
    'ϵ': 'epsilon', 'ϴ': 'Theta',
}

MATH_SYMBOLS = {
    # Calculus and big operators
    '∫': 'integral', '∬': 'double-integral', '∭': 'triple-integral',
    '∮': 'contour-integral', '∑': 'sum', '∏': 'product',
    '√': 'sqrt', '∛': 'cbrt', '∜': 'fourthrt',
    '∞': 'infinity', '∂': 'partial', '∇': 'nabla', '∆': 'delta',
    # Relations
    '≈': '~', '≠': '!=', '≤': '<=', '≥': '>=',
    '≡': '===', '≢': '!==', '±': '+/-', '∓': '-/+',
    '×': 'x', '÷': '/',
    # Arrows
    '→': '->', '←': '<-', '↔': '<->',
    '⇒': '=>', '⇐': '<=', '⇔': '<=>',
    '↑': 'up', '↓': 'down',
    # Units and letterlike symbols
    '°C': ' degrees C', '°F': ' degrees F',
    '℃': ' degrees C', '℉': ' degrees F', '°': ' degrees',
    'ℏ': 'h-bar', 'ℓ': 'l', '℮': 'e',
    'ℝ': 'R', 'ℤ': 'Z', 'ℕ': 'N', 'ℚ': 'Q', 'ℂ': 'C',
    # Primes
    '′': "'", '″': '"', '‴': "'''",
    # Sets and logic
    '∈': 'in', '∉': 'not-in', '⊂': 'subset', '⊃': 'superset',
    '⊆': 'subseteq', '⊇': 'supseteq', '∪': 'union', '∩': 'intersection',
    '∅': 'empty-set', '∀': 'forall', '∃': 'exists',
    '∧': 'and', '∨': 'or', '¬': 'not',
}

SYMBOL_TABLE = {**GREEK_LETTERS, **MATH_SYMBOLS}

# Longest keys first so '°C' wins over '°'
SYMBOL_PATTERN = re.compile(
    '|'.join(re.escape(key) for key in sorted(SYMBOL_TABLE, key=len, reverse=True))
)
SUPERSCRIPT_PATTERN = re.compile('[' + ''.join(SUPERSCRIPTS) + ']+')
SUBSCRIPT_PATTERN = re.compile('[' + re.escape(''.join(SUBSCRIPTS)) + ']+')


def _fold_compatibility(match: re.Match) -> str:
    return unicodedata.normalize('NFKC', match.group(0))


def _convert_superscripts(match: re.Match) -> str:
    return '^' + ''.join(SUPERSCRIPTS[ch] for ch in match.group(0))


def _convert_subscripts(match: re.Match) -> str:
    return '_' + ''.join(SUBSCRIPTS[ch] for ch in match.group(0))


def _replace_symbol(match: re.Match) -> str:
    replacement = SYMBOL_TABLE[match.group(0)]
    text = match.string
    start, end = match.span()

    if replacement[0].isalnum() and start > 0 and text[start - 1].isalnum():
        replacement = ' ' + replacement
    if replacement[-1].isalnum() and end < len(text) and text[end].isalnum():
        replacement = replacement + ' '
    return replacement


class UnicodeMathNormalizer(BaseStage):
    """Folds math alphanumerics and spells out Greek letters and operators."""

    name = "Unicode Math Normalizer"

    def process(self, text: str) -> StageResult:
        if not text:
            return StageResult(text=text)

        result, folded = COMPATIBILITY_PATTERN.subn(_fold_compatibility, text)
        result, superscripts = SUPERSCRIPT_PATTERN.subn(_convert_superscripts, result)
        result, subscripts = SUBSCRIPT_PATTERN.subn(_convert_subscripts, result)
        result, symbols = SYMBOL_PATTERN.subn(_replace_symbol, result)

        return StageResult(
            text=result,
            changes_made=folded + superscripts + subscripts + symbols,
            metadata={
                'folded': folded,
                'superscript_runs': superscripts,
                'subscript_runs': subscripts,
                'symbols': symbols,
            },
        )

"""
Tests for ContentSanitizer and clean()

End-to-end scenarios on realistic selections, the invariants every result
must satisfy, and the validation/fallback state machine.
"""

import logging
import re

import pytest

from prompt_sanitizer import ContentSanitizer, SanitizerOptions, clean
from prompt_sanitizer.stages import HtmlDecoder
from prompt_sanitizer.utils import normalize_whitespace
from prompt_sanitizer.utils.text_utils import light_normalize

NAVIER_STOKES = r"""Navier–Stokes equations
  Main article: Navier–Stokes equations
  The Navier–Stokes equations (named after Claude-Louis Navier and George Gabriel Stokes) are differential equations that describe the force balance at a given point within a fluid. For an incompressible fluid with vector velocity field
  u
  {\displaystyle \mathbf {u} }, the Navier–Stokes equations are[13][14][15][16]

  ∂
  u
  ∂
  t
  +
  (
  u
  ⋅
  ∇
  )
  u
  =
  −
  1
  ρ
  ∇
  p
  +
  ν
  ∇
  2
  u
  {\displaystyle {\frac {\partial \mathbf {u} }{\partial t}}+(\mathbf {u} \cdot \nabla )\mathbf {u} =-{\frac {1}{\rho }}\nabla p+\nu \nabla ^{2}\mathbf {u} }.
  These differential equations are the analogues for deformable materials to Newton's equations of motion for particles – the Navier–Stokes equations describe changes in momentum (force) in response to pressure
  p
  {\displaystyle p} and viscosity, parameterized by the kinematic viscosity
  ν
  {\displaystyle \nu }. Occasionally, body forces, such as the gravitational force or Lorentz force are added to the equations.

  Solutions of the Navier–Stokes equations for a given physical problem must be sought with the help of calculus. In practical terms, only the simplest cases can be solved exactly in this way. These cases generally involve non-turbulent, steady flow in which the Reynolds number is small. For more complex cases, especially those involving turbulence, such as global weather systems, aerodynamics, hydrodynamics and many more, solutions of the Navier–Stokes equations can currently only be found with the help of computers. This branch of science is called computational fluid dynamics.[17][18][19][20][21]"""

CHEMISTRY = """Water (H₂O) is a polar molecule. The reaction 2H₂ + O₂ → 2H₂O releases energy.
The pH scale ranges from 0-14, where pH = -log₁₀[H⁺].
Temperature: 25°C (77°F)
Avogadro's number: 6.022 × 10²³ molecules/mol
Bond angle: 104.5° ± 0.1°
Concentration: 1.5 µM to 10 µM
The equilibrium constant Kₑq = [C]^c[D]^d / [A]^a[B]^b"""

PROGRAMMING = """QuickSort Algorithm
The quicksort algorithm is defined as:

```python
def quicksort(arr):
    if len(arr) <= 1:
        return arr
    pivot = arr[len(arr) // 2]
    left = [x for x in arr if x < pivot]
    return quicksort(left) + [pivot] + quicksort(right)
```

The time complexity is O(n log n) on average. The inline function `partition()` splits the array.

Visit https://en.wikipedia.org/wiki/Quicksort for more details.
Email: support@example.com for questions."""

INVISIBLE = (
    "This\u200b is\u200c a\u200d test\u2060 of\ufeff invisible\u00ad characters "
    "in an ordinary sentence that keeps going for validation."
)

SYMBOLS_ONLY = "[1][2][3] ∑ ∫ ≈ ≠ ± × ÷ √ ∞ → ← ↔ [4][5]"

TABLE = """Comparison of Algorithms

| Algorithm | Time | Space | Stable |
|-----------|------|-------|--------|
| QuickSort | O(n log n) | O(log n) | No |
| MergeSort | O(n log n) | O(n) | Yes |
| HeapSort  | O(n log n) | O(1) | No |
+===========+======+=======+========+
| Total     | Varies based on input |

The table above shows[1][2] different sorting algorithms."""

PHYSICS = """Einstein's field equations: Gμν + Λgμν = (8πG/c⁴)Tμν

The wave function Ψ(x,t) evolves according to:
iℏ ∂Ψ/∂t = ĤΨ

Where:
• ℏ = h/2π (reduced Planck constant)
• Ĥ is the Hamiltonian operator
• α ≈ 1/137 (fine structure constant)
• ∫₀^∞ |Ψ|² dx = 1 (normalization)

Common relations:
ΔE·Δt ≥ ℏ/2 (Heisenberg uncertainty)
E = mc² (mass-energy equivalence)
F = ma (Newton's second law)"""

ENTITIES = """The company&apos;s motto is &quot;Innovation&quot; &mdash; they&rsquo;ve been around since 1990&hellip;

Key points:
&bull; First item&nbsp;&nbsp;with spaces
&bull; Second &lt;important&gt; item
&bull; Third item (see &#91;1&#93;)

Temperature &gt; 100&deg;C but &lt; 200&deg;C."""

LONG_PROSE = "The quick brown fox jumps over the lazy dog. " * 200

TAG_RE = re.compile(r'<[A-Za-z/!?][^<>]*>')
INVISIBLE_RE = re.compile('[\u200b-\u200f\u2060\ufeff\u00ad\u202a-\u202e\u2066-\u2069]')


def word_count(text: str) -> int:
    return len(re.findall(r'\b\w+\b', text))


class TestScenarios:
    """Realistic selections from the web and PDFs."""

    def test_wikipedia_latex_article(self):
        result = clean(NAVIER_STOKES)

        assert "\\displaystyle" not in result
        assert "\\mathbf" not in result
        assert "[13]" not in result
        assert "Main article:" not in result
        assert "Navier" in result
        assert "differential equations" in result
        assert "computational fluid dynamics" in result
        assert word_count(result) >= 50

        reduction = (1 - len(result) / len(NAVIER_STOKES)) * 100
        assert 20 <= reduction <= 60

    def test_chemistry_subscripts_and_superscripts(self):
        result = clean(CHEMISTRY)

        for symbol in ("₂", "²", "×", "µ", "°"):
            assert symbol not in result
        assert "H_2O" in result
        assert "10^23" in result
        assert word_count(result) >= 20

    def test_programming_article(self):
        result = clean(PROGRAMMING)

        assert "```" not in result
        assert "def quicksort" not in result
        assert "https://" not in result
        assert "@example.com" not in result
        assert "[code block]" in result
        assert "QuickSort Algorithm" in result
        assert "time complexity" in result

    def test_invisible_characters(self):
        result = clean(INVISIBLE)

        assert result == ("This is a test of invisible characters in an ordinary "
                          "sentence that keeps going for validation.")

    def test_symbols_only_falls_back(self):
        report = ContentSanitizer().sanitize_with_report(SYMBOLS_ONLY)

        assert report.used_fallback
        assert report.validation is not None and not report.validation.valid
        assert report.text == normalize_whitespace(SYMBOLS_ONLY)[:5000]

    def test_table_article(self):
        result = clean(TABLE)

        assert "|" not in result
        assert "---" not in result
        assert "===" not in result
        assert "[1]" not in result
        assert "Comparison of Algorithms" in result
        assert "sorting algorithms" in result

    def test_physics_greek_letters(self):
        result = clean(PHYSICS)

        for symbol in ("μ", "Ψ", "∂", "∫", "ℏ", "≈", "≥"):
            assert symbol not in result
        assert "alpha" in result
        assert "integral" in result
        assert word_count(result) >= 15

    def test_html_entities(self):
        result = clean(ENTITIES)

        for entity in ("&quot;", "&mdash;", "&bull;", "&nbsp;", "&#"):
            assert entity not in result
        assert "Innovation" in result
        assert "First item" in result
        assert "<important>" not in result


class TestInvariants:
    """Properties every result must satisfy."""

    @pytest.mark.parametrize("text", [NAVIER_STOKES, CHEMISTRY, PROGRAMMING, TABLE, INVISIBLE, PHYSICS])
    def test_idempotent(self, text):
        once = clean(text)
        assert clean(once) == once

    def test_hyphenated_symbol_name_is_not_split(self):
        text = ("Planck's constant appears throughout quantum mechanics and sets the scale of action.\n"
                "• ℏ = h/2π (reduced Planck constant)\n"
                "It relates the energy of a photon to its frequency in every textbook.")
        once = clean(text)

        assert "• h-bar = h/2 pi (reduced Planck constant)" in once
        assert clean(once) == once

    @pytest.mark.parametrize("max_length", [1, 10, 57, 100, 5000])
    def test_length_bound(self, max_length):
        result = clean(LONG_PROSE, max_length=max_length)

        assert len(result) <= max_length + 3

    def test_truncates_at_sentence_boundary(self):
        result = clean(LONG_PROSE, max_length=100)

        assert result == "The quick brown fox jumps over the lazy dog. The quick brown fox jumps over the lazy dog."

    def test_no_markup_leaks(self):
        text = ("<div><p>Hello <b>world</b></p><script>alert(1)</script></div> "
                "&lt;em&gt;escaped&lt;/em&gt; " + LONG_PROSE[:300])
        assert not TAG_RE.search(clean(text))

    @pytest.mark.parametrize("fragment", ["<{b>", "<[12]b>", "<```b>", "<\U0001F600b>"])
    def test_no_markup_reformed_by_later_deletions(self, fragment):
        text = LONG_PROSE[:135] + "Click " + fragment + "here now. " + LONG_PROSE[:135]

        assert not TAG_RE.search(clean(text))

    def test_no_control_or_invisible_characters(self):
        text = "Line one\x00 with\x07 bells\tand tabs\r\nLine two\u200b\u202e " + LONG_PROSE[:300]
        result = clean(text)

        assert all(ch == '\n' or ord(ch) >= 32 for ch in result)
        assert not INVISIBLE_RE.search(result)

    @pytest.mark.parametrize("value", [
        None, "", "   ", 123, b"bytes input", "\x00\x01", "<<<>>>", "$$$$",
        "{\\displaystyle", "```", "\ud800", "[equation]" * 50,
    ])
    def test_never_raises(self, value):
        result = clean(value, silent=True)

        assert isinstance(result, str)

    def test_empty_inputs(self):
        assert clean(None) == ""
        assert clean("") == ""
        assert clean("   \n\t ") == ""


class TestOptions:
    """Option handling and feature flags."""

    def test_invalid_options_raise(self):
        with pytest.raises(ValueError):
            SanitizerOptions(max_length=0)
        with pytest.raises(ValueError):
            clean("text", min_words=-1)

    def test_overrides_apply_on_top_of_options(self):
        base = SanitizerOptions(max_length=100)
        result = clean(LONG_PROSE, base, max_length=5000)

        assert len(result) > 100

    def test_preserve_equations_keeps_unicode_math(self):
        result = clean(CHEMISTRY, preserve_equations=True)

        assert "H₂O" in result
        assert "H_2O" not in result

    def test_aggressive_unicode_folds_to_ascii(self):
        text = ("Café au lait is a popular drink in many countries, "
                "served hot with steamed milk every morning.")
        result = clean(text, aggressive_unicode=True)

        assert result.isascii()
        assert "Cafe au lait" in result

    def test_encoding_repair_toggle(self):
        text = "The cafÃ© on the corner serves excellent coffee and pastries to everyone in town."

        assert "café" in clean(text)
        assert "cafÃ©" in clean(text, repair_encoding=False)

    def test_bytes_input_decoded_as_utf8(self):
        assert clean(PROGRAMMING.encode("utf-8")) == clean(PROGRAMMING)


class TestFallback:
    """Validation and exception handling at the sanitizer boundary."""

    def test_valid_report(self):
        report = ContentSanitizer().sanitize_with_report(PROGRAMMING)

        assert not report.used_fallback
        assert report.validation.valid
        assert report.error is None
        assert "HTML Decoder" in report.stage_stats

    def test_stage_exception_routes_to_fallback(self, monkeypatch):
        def boom(self, text):
            raise RuntimeError("boom")

        monkeypatch.setattr(HtmlDecoder, "process", boom)
        report = ContentSanitizer(SanitizerOptions(silent=True)).sanitize_with_report(PROGRAMMING)

        assert report.used_fallback
        assert report.error == "RuntimeError: boom"
        assert report.validation is None
        assert report.text == light_normalize(PROGRAMMING)[:5000]
        assert "boom" in report.stage_stats["HTML Decoder"]["error"]

    def test_fallback_is_truncated(self):
        report = ContentSanitizer(SanitizerOptions(max_length=10)).sanitize_with_report(SYMBOLS_ONLY)

        assert report.used_fallback
        assert report.text == normalize_whitespace(SYMBOLS_ONLY)[:10]

    def test_fallback_strips_markup(self):
        result = clean("<b>tiny</b>\u200b text")

        assert result == "tiny text"

    def test_fallback_is_logged(self, caplog):
        with caplog.at_level(logging.WARNING):
            clean("too short")

        assert "using fallback" in caplog.text

    def test_silent_suppresses_fallback_log(self, caplog):
        with caplog.at_level(logging.WARNING):
            clean("too short", silent=True)

        assert not [r for r in caplog.records if r.levelno >= logging.WARNING]

    def test_unsupported_type_is_empty(self, caplog):
        with caplog.at_level(logging.WARNING):
            assert clean(["not", "text"]) == ""

        assert "Unsupported input type" in caplog.text

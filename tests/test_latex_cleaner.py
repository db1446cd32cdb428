"""
Tests for the LaTeX cleaner stage and its line-level quality filter.
"""

from prompt_sanitizer.stages import LatexCleaner, LineFilterHeuristics


class TestDisplaystyleBlocks:
    """Tests for {\\displaystyle ...} replacement."""

    def test_replaces_simple_block(self):
        text = "velocity field {\\displaystyle \\mathbf {u} }, the equations are"
        result = LatexCleaner().process(text)

        assert "[equation]" in result.text
        assert "displaystyle" not in result.text
        assert "\\" not in result.text
        assert "the equations are" in result.text

    def test_replaces_nested_block_whole(self):
        text = "{\\displaystyle {\\frac {a}{b}}+c} and more words here"
        result = LatexCleaner().process(text)

        assert "frac" not in result.text
        assert "}" not in result.text
        assert result.text.split() == ["[equation]", "and", "more", "words", "here"]
        assert result.metadata['displaystyle_blocks'] == 1

    def test_unbalanced_block_replaces_token(self):
        result = LatexCleaner().process("{\\displaystyle x + y and then the text")

        assert "displaystyle" not in result.text
        assert "and then the text" in result.text


class TestEnvironmentsAndCommands:
    """Tests for environment, command and brace removal."""

    def test_replaces_environment(self):
        text = "Before\n\\begin{align}\na &= b\n\\end{align}\nAfter text here"
        result = LatexCleaner().process(text)

        assert "align" not in result.text
        assert "[equation]" in result.text
        assert result.text.startswith("Before\n")
        assert result.text.endswith("\nAfter text here")

    def test_removes_commands_with_arguments(self):
        result = LatexCleaner().process("The \\mathbf{F} vector and \\textit{italic words} here")

        assert "\\" not in result.text
        assert "mathbf" not in result.text
        assert "italic" not in result.text
        assert result.text.split() == ["The", "vector", "and", "here"]

    def test_brace_with_command_becomes_math_placeholder(self):
        text, count = LatexCleaner()._collapse_braces("{a \\alpha b} and {plain}")

        assert "[math]" in text
        assert "plain" not in text
        assert count == 2

    def test_strips_stray_braces_and_backslashes(self):
        result = LatexCleaner().process("Set notation { is here \\ too }")

        assert "{" not in result.text
        assert "\\" not in result.text


class TestLineFilter:
    """Tests for the prose/debris line filter."""

    def test_drops_debris_lines_and_keeps_blank_lines(self):
        text = "Good prose line here.\nx\n= + - ( )\n\nAnother prose line."
        result = LatexCleaner().process(text)

        assert result.text == "Good prose line here.\n\nAnother prose line."
        assert result.metadata['dropped_lines'] == 2

    def test_drops_low_letter_ratio_lines(self):
        result = LatexCleaner().process("abc 1234567890 1234567890\nKeep this line.")

        assert result.text == "Keep this line."

    def test_drops_lines_with_many_equation_placeholders(self):
        line = "[equation] a [equation] b [equation] c [equation] d [equation] end"
        result = LatexCleaner().process(line + "\nKeep this line.")

        assert result.text == "Keep this line."

    def test_keeps_placeholder_only_lines(self):
        result = LatexCleaner().process("Intro text\n [equation] \nOutro text")

        assert result.text == "Intro text\n [equation] \nOutro text"

    def test_keeps_non_latin_prose(self):
        text = "Уравнения Навье Стокса описывают движение жидкости"
        assert LatexCleaner().process(text).text == text

    def test_thresholds_are_configurable(self):
        relaxed = LatexCleaner(LineFilterHeuristics(min_line_length=1))

        assert relaxed.process("ab").text == "ab"
        assert LatexCleaner().process("ab").text == ""

    def test_heuristics_from_config_with_override(self):
        heuristics = LineFilterHeuristics.from_config(min_letter_ratio=0.5)

        assert heuristics.min_letter_ratio == 0.5
        assert heuristics.min_line_length == 3
        assert heuristics.max_equation_placeholders == 4

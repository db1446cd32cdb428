"""
Tests for the prompt-sanitizer command line
"""

import io
import sys

from prompt_sanitizer import clean, logging_config
from prompt_sanitizer.cli import main

PROSE = ("The quick brown fox jumps over the lazy dog while the farmer "
         "watches from the porch.[1] See https://example.com for more.")


class TestCli:

    def test_prints_cleaned_file(self, tmp_path, capsys):
        source = tmp_path / "article.txt"
        source.write_text(PROSE, encoding="utf-8")

        assert main(["--input", str(source)]) == 0
        assert capsys.readouterr().out == clean(PROSE) + "\n"

    def test_writes_output_dir(self, tmp_path):
        source = tmp_path / "article.txt"
        source.write_text(PROSE, encoding="utf-8")
        out_dir = tmp_path / "cleaned"

        assert main(["--input", str(source), "--output-dir", str(out_dir)]) == 0
        assert (out_dir / "article_cleaned.txt").read_text(encoding="utf-8") == clean(PROSE)

    def test_reads_stdin(self, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "stdin", io.StringIO(PROSE))
        out_dir = tmp_path / "cleaned"

        assert main(["--output-dir", str(out_dir)]) == 0
        assert (out_dir / "stdin_cleaned.txt").read_text(encoding="utf-8") == clean(PROSE)

    def test_stats_go_to_stderr(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO(PROSE))

        assert main(["--stats"]) == 0
        captured = capsys.readouterr()
        assert "[OK] <stdin>" in captured.err
        assert "Length:" in captured.err
        assert "Placeholders:" in captured.err
        assert "Length:" not in captured.out

    def test_stats_report_fallback(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO("too short"))

        main(["--stats", "--silent"])
        assert "[FALLBACK] <stdin>" in capsys.readouterr().err

    def test_flags_reach_options(self, monkeypatch, capsys):
        text = "Café au lait is a popular drink in many countries, served hot every morning."
        monkeypatch.setattr(sys, "stdin", io.StringIO(text))

        main(["--aggressive-unicode"])
        out = capsys.readouterr().out
        assert out.isascii()
        assert "Cafe" in out

    def test_invalid_option_exits_2(self, capsys):
        assert main(["--max-length", "0"]) == 2
        assert "error: max_length" in capsys.readouterr().err

    def test_unreadable_file_exits_1(self, tmp_path, capsys):
        source = tmp_path / "article.txt"
        source.write_text(PROSE, encoding="utf-8")

        assert main(["--input", str(tmp_path / "missing.txt"), str(source)]) == 1
        assert clean(PROSE) in capsys.readouterr().out

    def test_debug_steps(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO(PROSE))

        assert main(["--debug-steps"]) == 0
        out = capsys.readouterr().out
        assert "===== original =====" in out
        assert "===== URL Stripper =====" in out
        assert "===== Length Capper =====" in out

    def test_closes_trace_file(self, tmp_path, monkeypatch):
        trace = tmp_path / "trace.log"
        monkeypatch.setattr(logging_config, "DEBUG_LOG_FILE", trace)
        source = tmp_path / "article.txt"
        source.write_text(PROSE, encoding="utf-8")

        main(["--input", str(source), "--output-dir", str(tmp_path / "cleaned")])

        content = trace.read_text(encoding="utf-8")
        assert "[INFO] [CLI] Saved cleaned text to:" in content
        assert content.rstrip().splitlines()[-1].startswith("Ended:")

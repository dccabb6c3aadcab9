"""
Tests for the terminal client.
"""

import pytest

from .. import cli


def feed(monkeypatch, *answers):
    """Answer input() prompts in order, then hit end of input."""
    answers = list(answers)

    def fake_input(prompt=""):
        if not answers:
            raise EOFError
        return answers.pop(0)

    monkeypatch.setattr("builtins.input", fake_input)


class TestCLI:
    """Tests for the eights command."""

    def test_no_command_prints_help(self, capsys):
        with pytest.raises(SystemExit) as exc:
            cli.main([])
        assert exc.value.code == 1
        assert "play" in capsys.readouterr().out

    def test_play_and_quit(self, monkeypatch, capsys):
        feed(monkeypatch, "q")
        cli.main(["play", "--seed", "3", "--delay", "0"])

        out = capsys.readouterr().out
        assert "Your hand: 1:" in out
        assert "Your turn! Match the suit or rank." in out

    def test_draw_then_end_of_input(self, monkeypatch, capsys):
        feed(monkeypatch, "d")
        cli.main(["play", "--seed", "3", "--delay", "0"])

        assert "You drew a card." in capsys.readouterr().out

    def test_invalid_choice(self, monkeypatch, capsys):
        feed(monkeypatch, "zz", "99", "q")
        cli.main(["play", "--seed", "3", "--delay", "0"])

        assert capsys.readouterr().out.count("Invalid choice.") == 2

"""
Tests for the command-line interface.
"""

import argparse

import pytest

from ..cli import main, cmd_play
from ..config import Config, GameConfig


def scripted(lines):
    """input() replacement that replays lines, then signals EOF."""
    queue = list(lines)

    def fake_input(prompt=""):
        if not queue:
            raise EOFError
        return queue.pop(0)

    return fake_input


class TestDeckCommand:
    """mindmatch deck."""

    def test_prints_seeded_deck(self, capsys, monkeypatch):
        monkeypatch.delenv("MINDMATCH_CONFIG", raising=False)
        main(["deck", "--pairs", "3", "--seed", "1"])
        first = capsys.readouterr().out

        main(["deck", "--pairs", "3", "--seed", "1"])
        second = capsys.readouterr().out

        assert first == second
        assert len(first.strip().splitlines()) == 6

    def test_too_many_pairs(self, capsys):
        with pytest.raises(SystemExit):
            main(["deck", "--pairs", "99"])
        assert "Error" in capsys.readouterr().out

    def test_zero_pairs_rejected(self, capsys, monkeypatch):
        monkeypatch.setenv("MINDMATCH_PAIR_COUNT", "3")
        with pytest.raises(SystemExit):
            main(["deck", "--pairs", "0"])
        assert "Error" in capsys.readouterr().out

    def test_no_command(self):
        with pytest.raises(SystemExit):
            main([])


class TestPlayCommand:
    """mindmatch play with scripted input."""

    def make_args(self, pairs=2, seed=0):
        return argparse.Namespace(pairs=pairs, seed=seed, delay=0)

    def test_quit(self, capsys):
        assert cmd_play(self.make_args(), Config(), input_fn=scripted(["q"])) == 0
        assert "Score: 0" in capsys.readouterr().out

    def test_zero_pairs_rejected(self, capsys):
        with pytest.raises(SystemExit):
            cmd_play(self.make_args(pairs=0), Config(), input_fn=scripted(["q"]))
        assert "Error" in capsys.readouterr().out

    def test_bad_input_reported(self, capsys):
        cmd_play(self.make_args(), Config(), input_fn=scripted(["abc", "42"]))
        out = capsys.readouterr().out
        assert "Not a card number: abc" in out
        assert "out of range" in out

    def test_brute_force_completes(self, capsys):
        # Trying every pair of positions twice clears any two-pair board.
        taps = []
        for i in range(4):
            for j in range(i + 1, 4):
                taps += [str(i), str(j)]

        config = Config(game=GameConfig(match_reward=10))
        cmd_play(self.make_args(), config, input_fn=scripted(taps * 2))
        out = capsys.readouterr().out

        assert "All pairs found!" in out
        assert "Score: 20" in out


class TestServeCommand:
    """mindmatch serve hands the app to uvicorn."""

    @pytest.fixture
    def served(self, monkeypatch):
        uvicorn = pytest.importorskip("uvicorn")
        pytest.importorskip("fastapi")
        calls = []
        monkeypatch.setattr(
            uvicorn, "run", lambda app, **kwargs: calls.append((app, kwargs))
        )
        monkeypatch.delenv("MINDMATCH_CONFIG", raising=False)
        monkeypatch.delenv("MINDMATCH_HOST", raising=False)
        monkeypatch.setenv("MINDMATCH_PORT", "9123")
        return calls

    def test_uses_configured_port(self, served):
        assert main(["serve", "--host", "0.0.0.0"]) == 0

        app, kwargs = served[0]
        assert kwargs == {"host": "0.0.0.0", "port": 9123}
        assert "/api/v1/health" in {route.path for route in app.routes}

    def test_flags_override_config(self, served):
        main(["serve", "--port", "8181"])

        _, kwargs = served[0]
        assert kwargs == {"host": "127.0.0.1", "port": 8181}

"""
Tests for configuration and the command line.
"""

import json
from pathlib import Path

import pytest

from ..cli import main
from ..config import Settings
from ..engine_core.state import GamePhase, GameState
from ..persistence.schema import dump_save


class TestSettings:
    def test_defaults(self):
        settings = Settings.from_env({})

        assert settings.env == "development"
        assert settings.save_dir is None
        assert settings.seed is None
        assert settings.allowed_origins == ("*",)
        assert not settings.is_production

    def test_from_environment(self):
        settings = Settings.from_env({
            "KRISHICASH_ENV": "production",
            "KRISHICASH_SAVE_DIR": "/var/lib/krishicash",
            "KRISHICASH_LOG_LEVEL": "debug",
            "KRISHICASH_SEED": "42",
            "ALLOWED_ORIGINS": "https://a.example, https://b.example",
        })

        assert settings.is_production
        assert settings.save_dir == Path("/var/lib/krishicash")
        assert settings.log_level == "DEBUG"
        assert settings.seed == 42
        assert settings.allowed_origins == ("https://a.example", "https://b.example")

    def test_bad_seed(self):
        with pytest.raises(ValueError):
            Settings.from_env({"KRISHICASH_SEED": "abc"})


class TestCLI:
    def test_catalog(self, capsys):
        main(["catalog"])
        out = capsys.readouterr().out

        assert "Experienced Farmer" in out
        assert "₹3,00,000" in out
        assert "Quick Loan Offer" in out

    def test_inspect(self, tmp_path, capsys):
        path = tmp_path / "save.json"
        state = GameState(month=4, balance=25_000, savings=60_000, phase=GamePhase.SUMMARY)
        path.write_text(json.dumps(dump_save(state)), encoding="utf-8")

        main(["inspect", str(path)])
        out = capsys.readouterr().out

        assert "Month 4" in out
        assert "₹60,000" in out
        assert "stabilityScore recomputed" in out

    def test_inspect_invalid(self, tmp_path, capsys):
        path = tmp_path / "save.json"
        path.write_text(json.dumps({"gamePhase": "nowhere"}), encoding="utf-8")

        with pytest.raises(SystemExit):
            main(["inspect", str(path)])
        assert "Invalid save" in capsys.readouterr().out

    def test_simulate_and_save(self, tmp_path, capsys):
        target = tmp_path / "final.json"
        main(["simulate", "--seed", "7", "--difficulty", "easy", "--goal", "cycle", "--quiet",
              "--save", str(target)])
        out = capsys.readouterr().out

        assert target.exists()
        assert "Saved to" in out
        document = json.loads(target.read_text(encoding="utf-8"))
        assert document["state"]["gamePhase"] == "ended"

    def test_no_command(self):
        with pytest.raises(SystemExit):
            main([])

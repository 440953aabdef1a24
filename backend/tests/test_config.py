"""Tests for settings."""
from pathlib import Path

from starguide.config import Settings


def test_defaults(monkeypatch):
    monkeypatch.delenv("KNOWLEDGE_DIR", raising=False)
    settings = Settings(_env_file=None)
    assert settings.default_game_mode == "moc"
    assert settings.max_dps_teams == 10
    assert settings.max_support_teams == 12
    assert settings.knowledge_path is None
    assert not settings.scoring_diagnostics


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("KNOWLEDGE_DIR", str(tmp_path))
    monkeypatch.setenv("MAX_DPS_TEAMS", "4")
    monkeypatch.setenv("SCORING_DIAGNOSTICS", "true")

    settings = Settings(_env_file=None)

    assert settings.knowledge_path == Path(tmp_path)
    assert settings.max_dps_teams == 4
    assert settings.scoring_diagnostics


def test_only_engine_fields_are_declared():
    assert set(Settings.model_fields) == {
        "knowledge_dir",
        "default_game_mode",
        "max_dps_teams",
        "max_support_teams",
        "max_simulated_teams",
        "scoring_diagnostics",
    }

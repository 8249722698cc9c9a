"""
Test suite for host integration, settings and logging setup.
"""

import sys
import os
import random
from types import SimpleNamespace
import pytest

# Add the backend directory to Python path
sys.path.insert(
    0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "backend"))
)
sys.path.insert(0, os.path.dirname(__file__))

from combat_reactions import settings
from combat_reactions.attributes import InvalidAttributeSetError
from combat_reactions.host import apply_modern_combat
from combat_reactions.reaction_composer import ReactionComposer
from combat_reactions.thresholds import get_threshold_table, reset_threshold_table
from helpers import uniform_attributes


@pytest.fixture
def env(monkeypatch):
    """Patch environment variables and reload settings around a test."""
    yield monkeypatch
    monkeypatch.undo()
    settings.reload()
    reset_threshold_table()


class TestApplyModernCombat:
    """Test the host entry point."""

    def test_dict_character(self):
        character = {"attributes": uniform_attributes(50), "scenario": "Setting.\n"}

        appended = apply_modern_combat(character, rng=random.Random(4))

        assert character["scenario"] == "Setting.\n" + appended
        assert "# {{char}} should react to an explosion in this way:\n" in appended
        assert appended.endswith(".\n")

    def test_object_character(self):
        character = SimpleNamespace(attributes=uniform_attributes(60), scenario=None)

        appended = apply_modern_combat(character, rng=random.Random(4))

        assert character.scenario == appended
        assert "# In melee combat, {{char}} should fight " in appended

    def test_invalid_attributes_leave_scenario_untouched(self):
        raw = uniform_attributes(50)
        del raw["stress_control"]
        character = {"attributes": raw, "scenario": "Setting.\n"}

        with pytest.raises(InvalidAttributeSetError) as exc_info:
            apply_modern_combat(character)

        assert exc_info.value.missing == ["stress_control"]
        assert character["scenario"] == "Setting.\n"

    def test_missing_attributes_field(self):
        with pytest.raises(KeyError):
            apply_modern_combat({"scenario": ""})
        with pytest.raises(AttributeError):
            apply_modern_combat(SimpleNamespace(scenario=""))

    def test_repeated_calls_are_independent(self):
        character = {"attributes": uniform_attributes(50), "scenario": ""}
        first = apply_modern_combat(character, rng=random.Random(9))
        second = apply_modern_combat(character, rng=random.Random(9))
        assert first == second
        assert character["scenario"] == first + second


class TestSettings:
    """Test environment-driven configuration."""

    def test_defaults(self, env):
        for name in (
            "COMBAT_REACTIONS_DEBUG",
            "COMBAT_REACTIONS_TABLES_DIR",
            "COMBAT_REACTIONS_CHAR_TOKEN",
            "COMBAT_REACTIONS_SEED",
        ):
            env.delenv(name, raising=False)
        settings.reload()

        assert settings.DEBUG is False
        assert settings.TABLES_DIR == settings.DEFAULT_TABLES_DIR
        assert settings.CHAR_TOKEN == "{{char}}"
        assert settings.SEED is None

    def test_overrides(self, env):
        env.setenv("COMBAT_REACTIONS_DEBUG", "Yes")
        env.setenv("COMBAT_REACTIONS_CHAR_TOKEN", "<char>")
        env.setenv("COMBAT_REACTIONS_SEED", "1337")
        settings.reload()

        assert settings.DEBUG is True
        assert settings.CHAR_TOKEN == "<char>"
        assert settings.SEED == 1337

    def test_empty_char_token_falls_back(self, env):
        env.setenv("COMBAT_REACTIONS_CHAR_TOKEN", "")
        settings.reload()

        assert settings.CHAR_TOKEN == "{{char}}"
        text = ReactionComposer(uniform_attributes(50), rng=random.Random(3)).compose().text
        assert text.startswith("# {{char}} should react to an explosion in this way:\n")

    def test_bad_seed(self, env):
        env.setenv("COMBAT_REACTIONS_SEED", "lucky")
        with pytest.raises(ValueError, match="COMBAT_REACTIONS_SEED"):
            settings.reload()

    def test_seed_makes_composition_reproducible(self, env):
        env.setenv("COMBAT_REACTIONS_SEED", "42")
        settings.reload()

        first = ReactionComposer(uniform_attributes(50)).compose().text
        second = ReactionComposer(uniform_attributes(50)).compose().text
        assert first == second

    def test_tables_dir_override(self, env, tmp_path):
        env.setenv("COMBAT_REACTIONS_TABLES_DIR", str(tmp_path / "missing"))
        settings.reload()
        reset_threshold_table()

        with pytest.raises(ValueError, match="not found"):
            get_threshold_table()

    def test_debug_dumps_attributes(self, env, caplog):
        env.setenv("COMBAT_REACTIONS_DEBUG", "1")
        settings.reload()

        with caplog.at_level("INFO", logger="combat_reactions"):
            ReactionComposer(uniform_attributes(50), rng=random.Random(1)).compose()

        assert any("Attribute set:" in record.message for record in caplog.records)


class TestSetupLogging:
    """Test the host logging helper."""

    def test_debug_level(self, monkeypatch):
        calls = []
        monkeypatch.setattr(settings.logging, "basicConfig", lambda **kw: calls.append(kw))

        settings.setup_logging(debug=True)
        settings.setup_logging()

        assert calls[0]["level"] == settings.logging.DEBUG
        assert calls[1]["level"] == settings.logging.INFO
        assert "%(name)s" in calls[0]["format"]

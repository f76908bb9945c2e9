"""
Tests for AttributeManager and the derived stat tables.
Covers every breakpoint table, the defense formula, and the manager's
rewrite of derived fields on each attribute change.
"""
import pytest
from unittest.mock import Mock

from character.managers.attribute_manager import (
    AttributeManager,
    derive_stats,
    lookup_breakpoint,
    MOVEMENT_TABLE,
    MOVEMENT_FLOOR,
)
from character.models import Attributes, CharacterData
from character.events import EventType


@pytest.fixture
def mock_character_manager():
    """Mock CharacterManager holding a default snapshot"""
    manager = Mock()
    manager.character = CharacterData()
    return manager


@pytest.fixture
def attribute_manager(mock_character_manager):
    return AttributeManager(mock_character_manager)


class TestDeriveStats:
    """Pure derivation from an attribute set"""

    def test_reference_scenario(self):
        stats = derive_stats(Attributes(strength=9, speed=2, willpower=7, awareness=9))

        assert stats.lifting_capacity == "10,000 lb."
        assert stats.carrying_capacity == "5,000 lb."
        assert stats.movement == 25
        assert stats.senses_range == "Unobscured"
        assert stats.recovery_die == "1d12"
        assert stats.physical == 21

    def test_default_attributes(self):
        stats = derive_stats(Attributes())

        assert (stats.physical, stats.cognitive, stats.spiritual) == (14, 14, 14)
        assert stats.lifting_capacity == "200 lb."
        assert stats.carrying_capacity == "100 lb."
        assert stats.movement == 25
        assert stats.senses_range == "10 ft."
        assert stats.recovery_die == "1d6"

    def test_zero_attributes_hit_every_floor(self):
        stats = derive_stats(Attributes(strength=0, speed=0, intellect=0, willpower=0, awareness=0, presence=0))

        assert stats.lifting_capacity == "100 lb."
        assert stats.carrying_capacity == "50 lb."
        assert stats.movement == 20
        assert stats.senses_range == "5 ft."
        assert stats.recovery_die == "1d4"
        assert stats.physical == 10

    def test_negative_attributes_are_not_rejected(self):
        stats = derive_stats(Attributes(strength=-3, speed=-1, intellect=-2, willpower=-2, awareness=-5, presence=0))

        assert stats.physical == 6
        assert stats.cognitive == 6
        assert stats.spiritual == 5
        assert stats.movement == MOVEMENT_FLOOR
        assert stats.recovery_die == "1d4"

    @pytest.mark.parametrize("speed,expected", [(1, 25), (2, 25), (3, 30), (5, 40), (6, 40), (7, 60), (9, 80), (12, 80)])
    def test_movement_breakpoints(self, speed, expected):
        assert derive_stats(Attributes(speed=speed)).movement == expected

    @pytest.mark.parametrize("willpower,expected", [(0, "1d4"), (1, "1d6"), (3, "1d8"), (5, "1d10"), (7, "1d12"), (10, "1d12")])
    def test_recovery_die_breakpoints(self, willpower, expected):
        assert derive_stats(Attributes(willpower=willpower)).recovery_die == expected

    @pytest.mark.parametrize("awareness,expected", [(1, "10 ft."), (3, "20 ft."), (5, "50 ft."), (7, "100 ft."), (8, "100 ft.")])
    def test_senses_breakpoints(self, awareness, expected):
        assert derive_stats(Attributes(awareness=awareness)).senses_range == expected

    def test_deterministic(self):
        attributes = Attributes(strength=4, speed=6, intellect=1, willpower=3, awareness=2, presence=5)
        assert derive_stats(attributes) == derive_stats(attributes)

    def test_lookup_breakpoint_uses_highest_matching_threshold(self):
        assert lookup_breakpoint(MOVEMENT_TABLE, 8, MOVEMENT_FLOOR) == 60
        assert lookup_breakpoint(MOVEMENT_TABLE, 0, MOVEMENT_FLOOR) == MOVEMENT_FLOOR


class TestAttributeManager:
    """Manager updates on the snapshot"""

    def test_set_attribute_rewrites_derived_fields(self, attribute_manager, mock_character_manager):
        attribute_manager.set_attribute('strength', 9)
        character = mock_character_manager.character

        assert character.attributes.strength == 9
        assert character.defenses.physical == 21
        assert character.lifting_capacity == "10,000 lb."
        assert character.carrying_capacity == "5,000 lb."
        mock_character_manager.mark_dirty.assert_called_once()

    def test_set_attribute_emits_change_event(self, attribute_manager, mock_character_manager):
        attribute_manager.set_attribute('Awareness', 9)

        event = mock_character_manager.emit.call_args[0][0]
        assert event.event_type == EventType.ATTRIBUTE_CHANGED
        assert event.attribute == 'awareness'
        assert event.old_value == 2
        assert event.new_value == 9

    def test_set_attribute_keeps_deflect(self, attribute_manager, mock_character_manager):
        mock_character_manager.character.defenses.deflect = 2
        attribute_manager.set_attribute('speed', 5)

        assert mock_character_manager.character.defenses.deflect == 2
        assert mock_character_manager.character.movement == 40

    def test_unknown_attribute_raises(self, attribute_manager, mock_character_manager):
        with pytest.raises(ValueError, match="Unknown attribute"):
            attribute_manager.set_attribute('luck', 3)
        mock_character_manager.emit.assert_not_called()

    def test_set_attributes_batch(self, attribute_manager, mock_character_manager):
        derived = attribute_manager.set_attributes({'willpower': 5, 'intellect': 4})

        assert derived.cognitive == 19
        assert mock_character_manager.character.recovery_die == "1d10"

    def test_set_attributes_rejects_unknown_names(self, attribute_manager):
        with pytest.raises(ValueError):
            attribute_manager.set_attributes({'strength': 3, 'charm': 1})

    def test_set_deflect(self, attribute_manager, mock_character_manager):
        assert attribute_manager.set_deflect(2) == 2
        assert mock_character_manager.character.defenses.deflect == 2

        with pytest.raises(ValueError):
            attribute_manager.set_deflect(-1)

    def test_get_derived_stats_does_not_touch_snapshot(self, attribute_manager, mock_character_manager):
        mock_character_manager.character.attributes.strength = 7
        derived = attribute_manager.get_derived_stats()

        assert derived.lifting_capacity == "5,000 lb."
        assert mock_character_manager.character.lifting_capacity == ""


class TestAttributeManagerWired:
    """AttributeManager inside a real CharacterManager"""

    def test_set_attributes_batch_refreshes_surges(self, character_manager):
        character_manager.get_manager('identity').toggle_radiant_path('Windrunner')
        character_manager.get_manager('skill').set_skill_rank('Gravitation', 3)

        character_manager.get_manager('attribute').set_attributes({'awareness': 6, 'presence': 4})

        surges = {s.name: s for s in character_manager.character.surges}
        assert surges['Gravitation'].modifier == 9
        assert surges['Adhesion'].modifier == 0
        assert character_manager.character.senses_range == "50 ft."

    def test_set_attributes_batch_emits_per_changed_attribute(self, character_manager):
        character_manager.get_manager('attribute').set_attributes({'strength': 5, 'speed': 2})

        events = character_manager.get_event_history(EventType.ATTRIBUTE_CHANGED)
        assert [(e.attribute, e.old_value, e.new_value) for e in events] == [('strength', 2, 5)]

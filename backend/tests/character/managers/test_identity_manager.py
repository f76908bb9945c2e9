"""
Tests for IdentityManager: path selection, the Radiant bond and basic identity fields.
"""
import pytest

from character.events import EventType


@pytest.fixture
def identity(character_manager):
    return character_manager.get_manager('identity')


class TestPathSelection:

    def test_heroic_paths_combine(self, identity, character_manager):
        identity.toggle_heroic_path('Agent')
        identity.toggle_heroic_path('path_warrior')

        assert character_manager.character.path_names() == ['Agent', 'Warrior']

    def test_toggle_heroic_path_off(self, identity, character_manager):
        identity.toggle_heroic_path('Agent')
        identity.toggle_heroic_path('Agent')

        assert character_manager.character.paths == []
        assert character_manager.character.talents == []

    def test_unknown_heroic_path(self, identity):
        with pytest.raises(ValueError, match="Unknown heroic path"):
            identity.toggle_heroic_path('Windrunner')

    def test_radiant_path_sets_name_and_surges(self, identity, character_manager):
        identity.toggle_heroic_path('Agent')
        identity.toggle_radiant_path('Windrunner')

        character = character_manager.character
        assert character.radiant_path == 'Windrunner'
        assert character.path_names() == ['Agent', 'Windrunner']
        assert {s.name for s in character.surges} == {'Adhesion', 'Gravitation'}

    def test_selecting_second_radiant_path_replaces_first(self, identity, character_manager):
        identity.toggle_radiant_path('Windrunner')
        identity.toggle_radiant_path('Stoneward')

        character = character_manager.character
        assert character.path_names() == ['Stoneward']
        assert character.radiant_path == 'Stoneward'
        assert {s.name for s in character.surges} == {'Cohesion', 'Tension'}
        assert [t.name for t in character.talents] == ['First Ideal (Stoneward)']

    def test_deselecting_radiant_path_clears_name(self, identity, character_manager):
        identity.toggle_heroic_path('Scholar')
        identity.toggle_radiant_path('Windrunner')
        identity.toggle_radiant_path('Windrunner')

        character = character_manager.character
        assert character.radiant_path == ''
        assert character.path_names() == ['Scholar']
        assert character.surges == []

    def test_path_change_emits_event(self, identity, character_manager):
        identity.toggle_heroic_path('Envoy')

        events = character_manager.get_event_history(EventType.PATHS_CHANGED)
        assert events[-1].added == ['Envoy']


class TestRadiantIdeal:

    def test_requires_radiant_path(self, identity):
        with pytest.raises(ValueError, match="Radiant path"):
            identity.set_radiant_ideal(1)

    def test_clicking_current_level_steps_down(self, identity, character_manager):
        identity.toggle_radiant_path('Bondsmith')

        assert identity.set_radiant_ideal(3) == 3
        assert identity.set_radiant_ideal(3) == 2
        assert identity.set_radiant_ideal(5) == 5

    def test_out_of_range(self, identity):
        identity.toggle_radiant_path('Bondsmith')
        with pytest.raises(ValueError):
            identity.set_radiant_ideal(6)


class TestBondRange:

    @pytest.mark.parametrize("value,expected", [(10, 30), (30, 30), (70, 70), (140, 100)])
    def test_clamped(self, identity, value, expected):
        assert identity.set_bond_range(value) == expected

    def test_adjust_in_steps(self, identity):
        assert identity.adjust_bond_range(2) == 50
        assert identity.adjust_bond_range(-5) == 30
        assert identity.adjust_bond_range(10) == 100


class TestIdentityFields:

    def test_names_and_level(self, identity, character_manager):
        identity.set_names(player_name='Sam', character_name='Kaladin')
        identity.set_level(0)

        character = character_manager.character
        assert character.player_name == 'Sam'
        assert character.character_name == 'Kaladin'
        assert character.level == 1

    def test_set_ancestry_by_id_and_clear(self, identity, character_manager):
        assert identity.set_ancestry('anc_singer') == 'Singer'
        assert identity.set_ancestry(None) is None
        assert character_manager.character.ancestry is None

    def test_unknown_ancestry(self, identity):
        with pytest.raises(ValueError):
            identity.set_ancestry('Horneater Giant')

    def test_get_identity(self, identity):
        identity.toggle_radiant_path('Windrunner')
        identity.set_spren_name('Syl')

        info = identity.get_identity()
        assert info['radiantPath'] == 'Windrunner'
        assert info['sprenName'] == 'Syl'
        assert info['hasRadiantPath'] is True

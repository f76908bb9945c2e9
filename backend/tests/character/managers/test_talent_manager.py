"""
Tests for TalentManager and key talent reconciliation.
"""
import pytest

from character.managers.talent_manager import (
    reconcile_talents,
    required_key_talents,
    resolve_key_talent,
)
from character.models import HeroicPath, Talent
from gamedata.catalogue import PathTalents
from gamedata.lookup import find_by_id_or_name


def _path(catalogue, name):
    return find_by_id_or_name(catalogue.all_paths, name)


class TestResolveKeyTalent:

    def test_declared_key_talent_wins(self, catalogue):
        talent = resolve_key_talent(_path(catalogue, 'Windrunner'), catalogue.talents)

        assert talent.name == 'First Ideal (Windrunner)'
        assert talent.id == 'tal_first_ideal_windrunner'
        assert talent.path == 'Windrunner'
        assert talent.is_key_talent is True
        assert talent.description == 'Speak the First Ideal and bond a spren.'

    def test_key_attribute_fallback(self, catalogue):
        talent = resolve_key_talent(_path(catalogue, 'Agent'), catalogue.talents)

        assert talent.name == 'Opportunist'
        assert talent.id == 'tal_opportunist'
        assert talent.is_key_talent is True

    def test_key_attribute_fallback_without_catalogue_entry_uses_attribute_text(self):
        path = HeroicPath(name='Wanderer', key_attributes=['Long Road (Key Talent)', 'Speed'])
        talent = resolve_key_talent(path, {})

        assert talent.name == 'Long Road'
        assert talent.id is None
        assert talent.description == 'Long Road (Key Talent)'

    def test_declared_key_talent_without_entry_has_empty_description(self):
        path = HeroicPath(name='Order')
        talents = {'Order': PathTalents(key_talent='First Ideal (Order)', talents=[])}

        talent = resolve_key_talent(path, talents)
        assert talent.description == ''

    def test_path_without_key_talent(self):
        assert resolve_key_talent(HeroicPath(name='Plain', key_attributes=['Strength']), {}) is None

    def test_required_key_talents_follow_path_order(self, catalogue):
        paths = [_path(catalogue, 'Warrior'), _path(catalogue, 'Bondsmith')]
        names = [t.name for t in required_key_talents(paths, catalogue.talents)]
        assert names == ['Vigilant Stance', 'First Ideal (Bondsmith)']


class TestReconcileTalents:

    def test_returns_none_when_keys_match(self, catalogue):
        paths = [_path(catalogue, 'Agent')]
        talents = required_key_talents(paths, catalogue.talents)
        assert reconcile_talents(talents, paths, catalogue.talents) is None

    def test_order_of_existing_keys_does_not_matter(self, catalogue):
        paths = [_path(catalogue, 'Agent'), _path(catalogue, 'Envoy')]
        talents = list(reversed(required_key_talents(paths, catalogue.talents)))
        assert reconcile_talents(talents, paths, catalogue.talents) is None

    def test_keys_first_then_picked_talents(self, catalogue):
        picked = Talent(name='Plausible Excuse', path='Agent')
        paths = [_path(catalogue, 'Agent')]

        result = reconcile_talents([picked], paths, catalogue.talents)

        assert [t.name for t in result] == ['Opportunist', 'Plausible Excuse']
        assert result[0].is_key_talent is True

    def test_picked_talents_of_deselected_paths_are_kept(self, catalogue):
        talents = [
            Talent(name='Opportunist', path='Agent', is_key_talent=True),
            Talent(name='Plausible Excuse', path='Agent'),
        ]
        result = reconcile_talents(talents, [], catalogue.talents)
        assert [t.name for t in result] == ['Plausible Excuse']

    def test_idempotent(self, catalogue):
        paths = [_path(catalogue, 'Scholar'), _path(catalogue, 'Windrunner')]
        first = reconcile_talents([], paths, catalogue.talents)
        assert reconcile_talents(first, paths, catalogue.talents) is None


class TestTalentManager:

    def test_toggling_path_adds_key_talent(self, character_manager):
        character_manager.get_manager('identity').toggle_heroic_path('Hunter')

        keys = character_manager.get_manager('talent').get_key_talents()
        assert [(t.name, t.path) for t in keys] == [('Seek Quarry', 'Hunter')]

    def test_deselecting_radiant_path_resets_ideal(self, character_manager):
        identity = character_manager.get_manager('identity')
        identity.toggle_radiant_path('Windrunner')
        identity.set_radiant_ideal(3)

        identity.toggle_radiant_path('Windrunner')

        assert character_manager.character.radiant_ideal == 0
        assert character_manager.get_manager('talent').get_key_talents() == []

    def test_add_talent(self, character_manager):
        character_manager.get_manager('identity').toggle_radiant_path('Windrunner')
        talent = character_manager.get_manager('talent').add_talent('Windrunner', 'Flight')

        assert talent.id == 'tal_windrunner_flight'
        assert talent.is_key_talent is False
        assert character_manager.is_dirty()

    def test_add_talent_requires_active_path(self, character_manager):
        with pytest.raises(ValueError, match="not active"):
            character_manager.get_manager('talent').add_talent('Agent', 'Plausible Excuse')

    def test_add_unknown_talent(self, character_manager):
        character_manager.get_manager('identity').toggle_heroic_path('Agent')
        with pytest.raises(ValueError, match="not found"):
            character_manager.get_manager('talent').add_talent('Agent', 'Flight')

    def test_add_duplicate_talent(self, character_manager):
        character_manager.get_manager('identity').toggle_heroic_path('Agent')
        talent_manager = character_manager.get_manager('talent')
        talent_manager.add_talent('Agent', 'Plausible Excuse')

        with pytest.raises(ValueError, match="already taken"):
            talent_manager.add_talent('Agent', 'Plausible Excuse')

    def test_key_talent_cannot_be_removed(self, character_manager):
        character_manager.get_manager('identity').toggle_heroic_path('Agent')
        with pytest.raises(ValueError, match="cannot be removed"):
            character_manager.get_manager('talent').remove_talent('Agent', 'Opportunist')

    def test_remove_talent(self, character_manager):
        character_manager.get_manager('identity').toggle_heroic_path('Agent')
        talent_manager = character_manager.get_manager('talent')
        talent_manager.add_talent('Agent', 'Know Your Moment')

        talent_manager.remove_talent('Agent', 'Know Your Moment')

        assert not talent_manager.has_talent('Agent', 'Know Your Moment')
        with pytest.raises(ValueError):
            talent_manager.remove_talent('Agent', 'Know Your Moment')

    def test_available_talents_excludes_taken(self, character_manager):
        character_manager.get_manager('identity').toggle_heroic_path('Agent')

        available = character_manager.get_manager('talent').available_talents()

        names = [t['name'] for t in available['Agent']]
        assert 'Opportunist' not in names
        assert 'Plausible Excuse' in names

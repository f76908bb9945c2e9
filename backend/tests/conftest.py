"""Shared fixtures: the bundled catalogue and fully wired character managers."""
import pytest

from character.factory import create_character_manager
from character.in_memory_save_manager import InMemoryCharacterSession
from gamedata.catalogue import load_catalogue


@pytest.fixture(scope="session")
def catalogue():
    """Catalogue loaded from the bundled datasets"""
    return load_catalogue()


@pytest.fixture
def character_manager(catalogue):
    """CharacterManager with every manager registered on a default character"""
    return create_character_manager(catalogue=catalogue)


@pytest.fixture
def session(catalogue):
    return InMemoryCharacterSession(catalogue=catalogue)

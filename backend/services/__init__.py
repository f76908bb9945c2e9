"""
Services module for the Character Builder
Contains logic that isn't directly tied to one manager, such as save file serialization
"""

from .character_serializer import (
    CharacterLoadError,
    LoadedCharacter,
    load_character_json,
    serialize_to_json,
)

__all__ = ['CharacterLoadError', 'LoadedCharacter', 'load_character_json', 'serialize_to_json']

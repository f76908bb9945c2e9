"""
Lightweight FastAPI dependencies using the session registry
"""

from typing import Annotated
from fastapi import Depends
from loguru import logger

from character.character_manager import CharacterManager
from character.in_memory_save_manager import InMemoryCharacterSession


def get_character_session(character_id: int) -> InMemoryCharacterSession:
    """
    Get the editing session for a character id

    Args:
        character_id: Character ID (integer)

    Returns:
        InMemoryCharacterSession: Character session instance

    Raises:
        CharacterNotFoundException: If no session exists for the id
    """
    from fastapi_core.session_registry import get_character_session as lookup_session
    from fastapi_core.exceptions import CharacterNotFoundException

    session = lookup_session(character_id)
    if session is None:
        logger.warning(f"Character {character_id} not found in session registry")
        raise CharacterNotFoundException(character_id)
    return session


def get_character_manager(session: Annotated[InMemoryCharacterSession, Depends(get_character_session)]) -> CharacterManager:
    return session.character_manager


# FastAPI dependency annotations
CharacterManagerDep = Annotated[CharacterManager, Depends(get_character_manager)]
CharacterSessionDep = Annotated[InMemoryCharacterSession, Depends(get_character_session)]

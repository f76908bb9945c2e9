"""FastAPI Character Session Registry managing long-lived editing sessions."""

import threading
from typing import Dict, Optional, Tuple, TYPE_CHECKING
from loguru import logger

# Type hints only - no runtime imports to avoid heavy loading
if TYPE_CHECKING:
    from character.in_memory_save_manager import InMemoryCharacterSession


_character_sessions: Dict[int, "InMemoryCharacterSession"] = {}
_registry_lock = threading.Lock()

_next_session_id = 1


def create_character_session(catalogue=None) -> Tuple[int, "InMemoryCharacterSession"]:
    """Start a new character editing session and register it under a fresh integer id."""
    from character.in_memory_save_manager import InMemoryCharacterSession
    global _next_session_id

    session = InMemoryCharacterSession(catalogue=catalogue)
    with _registry_lock:
        character_id = _next_session_id
        _next_session_id += 1
        _character_sessions[character_id] = session

    logger.info(f"Created and registered character session {character_id}")
    return character_id, session


def get_character_session(character_id: int) -> Optional["InMemoryCharacterSession"]:
    """Get an existing session, or None if the id is unknown or the session was closed."""
    with _registry_lock:
        session = _character_sessions.get(character_id)
        if session is not None and session.character_manager is None:
            # Session is invalid, remove it
            logger.warning(f"Found closed session for character {character_id}, removing")
            _character_sessions.pop(character_id, None)
            return None
        return session


def close_character_session(character_id: int) -> bool:
    """Close and cleanup a character editing session."""
    with _registry_lock:
        session = _character_sessions.pop(character_id, None)
    if session is None:
        logger.debug(f"No session to close for character {character_id}")
        return False
    session.close()
    logger.info(f"Closed character session {character_id}")
    return True


def has_active_session(character_id: int) -> bool:
    with _registry_lock:
        return character_id in _character_sessions


def get_active_sessions() -> Dict[int, dict]:
    """Get information about all active sessions."""
    with _registry_lock:
        return {character_id: session.get_info() for character_id, session in _character_sessions.items()}


def cleanup_all_sessions():
    """Close all active sessions. Used for testing or shutdown."""
    global _next_session_id
    with _registry_lock:
        sessions = list(_character_sessions.values())
        _character_sessions.clear()
        _next_session_id = 1
    for session in sessions:
        session.close()
    logger.info(f"Cleaned up {len(sessions)} character sessions")

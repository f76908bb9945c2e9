"""Custom exceptions for the character builder API, mapped to JSON responses in fastapi_server."""

from typing import Optional
from fastapi import status


class CharacterBuilderException(Exception):
    """Base exception for all character builder API errors"""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class CharacterNotFoundException(CharacterBuilderException):
    """No editing session exists for the requested character id"""

    def __init__(self, character_id: int):
        self.character_id = character_id
        super().__init__(f"Character {character_id} not found", status.HTTP_404_NOT_FOUND)


class CharacterLoadException(CharacterBuilderException):
    """A save file could not be loaded into a session"""

    def __init__(self, message: str, character_id: Optional[int] = None):
        self.character_id = character_id
        super().__init__(message, status.HTTP_422_UNPROCESSABLE_ENTITY)

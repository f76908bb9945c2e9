"""
In-Memory Character Session

Simple approach: keep the whole character in memory, allow real-time
editing, then write a compact save file when the user clicks save.
Unsaved changes are measured against the snapshot as it was last saved or
loaded, so undoing an edit by hand also clears the flag.
"""

from pathlib import Path
from typing import Dict, Any, Optional, Tuple, Union, TYPE_CHECKING
from datetime import datetime

from loguru import logger

from .character_manager import CharacterManager
from .factory import create_character_manager
from .models import CharacterData

if TYPE_CHECKING:
    from gamedata.catalogue import GameDataCatalogue
    from services.character_serializer import LoadedCharacter


class InMemoryCharacterSession:
    """
    High-level session for character editing

    Handles the complete workflow:
    1. Create the character manager with every engine registered
    2. Handle the editing session
    3. Save to and load from compact JSON
    """

    def __init__(self, catalogue: Optional['GameDataCatalogue'] = None, character: Optional[CharacterData] = None):
        """
        Initialize a character editing session

        Args:
            catalogue: Game data catalogue; the shared singleton when omitted
            character: Starting snapshot; a new character when omitted
        """
        self.character_manager: Optional[CharacterManager] = create_character_manager(character, catalogue=catalogue)
        self.catalogue = self.character_manager.catalogue
        self.last_saved: Optional[datetime] = None
        self.last_loaded: Optional[datetime] = None
        self._saved_state = self._current_state()

        logger.info("Initialized character editing session")

    def _current_state(self) -> Dict[str, Any]:
        return self.character_manager.character.to_dict()

    def _mark_saved(self):
        self._saved_state = self._current_state()
        self.character_manager.mark_clean()

    @property
    def character(self) -> CharacterData:
        return self.character_manager.character

    def has_unsaved_changes(self) -> bool:
        """Check if the snapshot differs from the last save or load"""
        return self._current_state() != self._saved_state

    def save_json(self) -> Tuple[str, str]:
        """
        Serialize the character to compact JSON and mark it saved

        Returns:
            (filename, JSON text)
        """
        from services.character_serializer import serialize_to_json, save_filename

        text = serialize_to_json(self.character, self.catalogue)
        filename = save_filename(self.character)
        self._mark_saved()
        self.last_saved = datetime.now()
        logger.info(f"Serialized character to {filename}")
        return filename, text

    def save_to_file(self, directory: Union[str, Path]) -> Path:
        """
        Write the compact save into a directory

        Returns:
            Path of the written file
        """
        filename, text = self.save_json()
        target = Path(directory) / filename
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding='utf-8')
        logger.info(f"Saved character to {target}")
        return target

    def load_json(self, text: str) -> 'LoadedCharacter':
        """
        Replace the character with one parsed from save file text

        On failure the current character is left untouched.

        Raises:
            CharacterLoadError: The text is not a loadable character
        """
        from services.character_serializer import load_character_json

        loaded = load_character_json(text, self.catalogue)
        self.character_manager.load_character(loaded.character)
        self._mark_saved()
        self.last_loaded = datetime.now()
        return loaded

    def load_file(self, path: Union[str, Path]) -> 'LoadedCharacter':
        """Load a save file from disk"""
        text = Path(path).read_text(encoding='utf-8')
        logger.info(f"Loading character from {path}")
        return self.load_json(text)

    def new_character(self) -> CharacterData:
        """Discard the current character and start over"""
        if self.has_unsaved_changes():
            logger.warning("Starting a new character with unsaved changes")
        self.character_manager.reset()
        self._mark_saved()
        return self.character

    def get_info(self) -> Dict[str, Any]:
        """Get session information"""
        return {
            'character_name': self.character.character_name,
            'version': self.character_manager.character_version,
            'has_unsaved_changes': self.has_unsaved_changes(),
            'last_saved': self.last_saved.isoformat() if self.last_saved else None,
            'last_loaded': self.last_loaded.isoformat() if self.last_loaded else None,
        }

    def close(self):
        """Close the session"""
        if self.character_manager is not None and self.has_unsaved_changes():
            logger.warning("Closing character session with unsaved changes")
        self.character_manager = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

"""
CharacterManager - owns one character snapshot and the engines that keep it consistent
Managers mutate the snapshot in place; anything that touches several of them
at once (path changes, loads, resets) goes through this class so the
reconciliation order is always the same.
"""

from typing import Dict, List, Any, Optional, Type, Callable, TYPE_CHECKING
import copy
import time
from dataclasses import dataclass
from loguru import logger

from .events import EventEmitter, EventType
from .models import CharacterData, default_character

if TYPE_CHECKING:
    from gamedata.catalogue import GameDataCatalogue


@dataclass
class Transaction:
    """Represents a set of character changes that can be committed or rolled back"""
    id: str
    manager: 'CharacterManager'
    original_state: CharacterData
    changes: List[Dict[str, Any]]
    timestamp: float

    def __init__(self, manager: 'CharacterManager'):
        self.id = f"txn_{int(time.time() * 1000)}"
        self.manager = manager
        self.original_state = manager.character.model_copy(deep=True)
        self.changes = []
        self.timestamp = time.time()

    def add_change(self, change_type: str, details: Dict[str, Any]):
        """Record a change in this transaction"""
        self.changes.append({
            'type': change_type,
            'details': details,
            'timestamp': time.time()
        })

    def rollback(self):
        """Restore character to state before transaction"""
        logger.info(f"Rolling back transaction {self.id}")
        self.manager.character = self.original_state

    def commit(self) -> Dict[str, Any]:
        """Finalize the transaction and return summary"""
        logger.debug(f"Committing transaction {self.id} with {len(self.changes)} changes")
        return {
            'transaction_id': self.id,
            'changes': self.changes,
            'duration': time.time() - self.timestamp
        }


class CharacterManager(EventEmitter):
    """Aggregate root for a character snapshot and its registered managers"""

    def __init__(self, character: Optional[CharacterData] = None, catalogue: Optional['GameDataCatalogue'] = None):
        """
        Initialize the CharacterManager

        Args:
            character: Snapshot to edit; a default character when omitted
            catalogue: Game data catalogue; the shared singleton when omitted
        """
        super().__init__()

        if catalogue is None:
            from gamedata.catalogue import get_game_data_catalogue
            catalogue = get_game_data_catalogue()
        self.catalogue = catalogue

        self.character: CharacterData = character if character is not None else default_character(catalogue)
        self.character_version = 0

        # Manager registry
        self._managers: Dict[str, Any] = {}
        self._manager_classes: Dict[str, Type] = {}

        self._dirty = False
        self._current_transaction: Optional[Transaction] = None

        logger.debug("CharacterManager initialized")

    # ----------------------------------------------------------------
    # Manager registry
    # ----------------------------------------------------------------

    def register_manager(self, name: str, manager_class: Type, on_register: Optional[Callable] = None):
        """
        Register a subsystem manager

        Args:
            name: Manager name (e.g., 'attribute', 'skill')
            manager_class: Manager class to instantiate with this CharacterManager
            on_register: Optional callback called with the new instance
        """
        if not callable(manager_class):
            raise ValueError(f"Manager class {name} is not callable")

        try:
            manager_instance = manager_class(self)
        except Exception as e:
            logger.error(f"Failed to create {name} manager: {e}")
            raise RuntimeError(f"Could not create {name} manager: {e}")

        self._manager_classes[name] = manager_class
        self._managers[name] = manager_instance
        if on_register:
            on_register(manager_instance)
        logger.debug(f"Registered {name} manager")

    def get_manager(self, name: str):
        """
        Get a registered manager by name

        Returns:
            Manager instance or None if not registered
        """
        return self._managers.get(name)

    def get_all_managers(self) -> Dict[str, Any]:
        return dict(self._managers)

    # ----------------------------------------------------------------
    # Dirty tracking
    # ----------------------------------------------------------------

    def mark_dirty(self):
        self._dirty = True

    def mark_clean(self):
        self._dirty = False

    def is_dirty(self) -> bool:
        return self._dirty

    # ----------------------------------------------------------------
    # Transactions
    # ----------------------------------------------------------------

    def begin_transaction(self) -> Transaction:
        if self._current_transaction is not None:
            raise RuntimeError("Transaction already in progress")
        self._current_transaction = Transaction(self)
        return self._current_transaction

    def commit_transaction(self) -> Dict[str, Any]:
        if self._current_transaction is None:
            raise RuntimeError("No transaction in progress")
        summary = self._current_transaction.commit()
        self._current_transaction = None
        return summary

    def rollback_transaction(self):
        if self._current_transaction is None:
            raise RuntimeError("No transaction in progress")
        self._current_transaction.rollback()
        self._current_transaction = None

    # ----------------------------------------------------------------
    # Snapshot updates
    # ----------------------------------------------------------------

    def update_data(self, **changes) -> CharacterData:
        """
        Apply a partial update to the snapshot, then reconcile dependents

        Fields are snapshot attribute names (snake_case). A path change runs
        surge membership, then key talents, then the surge cache, all against
        the fully updated snapshot. An attribute change rewrites the derived
        stats. On any failure the snapshot is rolled back.

        Raises:
            ValueError: Unknown field name
        """
        unknown = [name for name in changes if name not in CharacterData.model_fields]
        if unknown:
            raise ValueError(f"Unknown character fields: {', '.join(unknown)}")

        txn = self.begin_transaction()
        try:
            for name, value in changes.items():
                setattr(self.character, name, copy.deepcopy(value))
                txn.add_change('field', {'name': name})

            if 'attributes' in changes:
                self._reconcile_attributes()
            if 'paths' in changes:
                self._reconcile_paths()
            elif 'skills' in changes or 'attributes' in changes:
                self._refresh_surges()
        except Exception:
            self.rollback_transaction()
            raise
        self.commit_transaction()

        self.mark_dirty()
        self.emit(EventType.STATE_CHANGED)
        return self.character

    def _reconcile_attributes(self):
        attribute_manager = self.get_manager('attribute')
        if attribute_manager is not None:
            attribute_manager.apply_derived_stats()

    def _reconcile_paths(self):
        skill_manager = self.get_manager('skill')
        talent_manager = self.get_manager('talent')
        if skill_manager is not None:
            skill_manager.reconcile()
        if talent_manager is not None:
            talent_manager.reconcile()
        if skill_manager is not None:
            skill_manager.refresh_surges()

    def _refresh_surges(self):
        skill_manager = self.get_manager('skill')
        if skill_manager is not None:
            skill_manager.refresh_surges()

    def reconcile(self):
        """Bring every derived part of the snapshot in line with its inputs"""
        self._reconcile_attributes()
        self._reconcile_paths()

    def reset(self) -> CharacterData:
        """Replace the snapshot with a new default character"""
        self.character = default_character(self.catalogue)
        self.reconcile()
        self.character_version += 1
        self.mark_dirty()
        self.emit(EventType.CHARACTER_RESET)
        logger.info("Character reset to defaults")
        return self.character

    def load_character(self, snapshot: CharacterData) -> CharacterData:
        """
        Replace the snapshot wholesale and reconcile it

        Key talents, surge skills and surges are re-derived from the loaded
        paths; derived stats come from the stored attributes. If
        reconciliation fails the previous snapshot is kept.
        """
        previous = self.character
        self.character = snapshot
        try:
            self.reconcile()
        except Exception:
            logger.exception("Reconciliation failed on load, keeping previous character")
            self.character = previous
            raise

        self.character_version += 1
        self.mark_clean()
        self.emit(EventType.CHARACTER_LOADED)
        logger.info(f"Loaded character '{snapshot.character_name or 'unnamed'}'")
        return self.character

    def get_character_state(self) -> Dict[str, Any]:
        """
        Finalized snapshot for rendering and the API

        Returns:
            Dict with the camelCase snapshot and a few computed extras
        """
        talent_manager = self.get_manager('talent')
        return {
            'version': self.character_version,
            'character': self.character.to_dict(),
            'hasRadiantPath': talent_manager.has_radiant_path() if talent_manager else False,
            'availableTalents': talent_manager.available_talents() if talent_manager else {},
        }

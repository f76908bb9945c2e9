"""
Event system for character management
Provides pub/sub pattern for communication between managers
"""

from typing import Dict, List, Callable, Optional
from dataclasses import dataclass, field
from enum import Enum
import time

from loguru import logger


class EventType(Enum):
    """Standard event types for character management"""
    ATTRIBUTE_CHANGED = 'attribute_changed'
    PATHS_CHANGED = 'paths_changed'
    SKILL_UPDATED = 'skill_updated'
    SURGES_CHANGED = 'surges_changed'
    TALENTS_CHANGED = 'talents_changed'
    ITEM_ADDED = 'item_added'
    ITEM_REMOVED = 'item_removed'
    CHARACTER_RESET = 'character_reset'
    CHARACTER_LOADED = 'character_loaded'
    STATE_CHANGED = 'state_changed'  # Generic state change event


@dataclass
class EventData:
    """Base class for event data"""
    event_type: Optional[EventType] = None  # Subclasses fill this in
    source_manager: str = ''
    timestamp: float = field(default_factory=time.time)

    def validate(self) -> bool:
        """Validate event data"""
        return True


@dataclass
class AttributeChangedEvent(EventData):
    """Data for attribute change events"""
    attribute: str = ''
    old_value: int = 0
    new_value: int = 0

    def __post_init__(self):
        self.event_type = EventType.ATTRIBUTE_CHANGED

    def validate(self) -> bool:
        return bool(self.attribute)


@dataclass
class PathsChangedEvent(EventData):
    """Data for path selection changes"""
    added: List[str] = field(default_factory=list)
    removed: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.event_type = EventType.PATHS_CHANGED


@dataclass
class SkillUpdatedEvent(EventData):
    """Data for skill rank changes"""
    skill_name: str = ''
    old_rank: int = 0
    new_rank: int = 0

    def __post_init__(self):
        self.event_type = EventType.SKILL_UPDATED


@dataclass
class TalentsChangedEvent(EventData):
    """Data for talent list changes"""
    action: str = 'reconciled'  # 'added', 'removed' or 'reconciled'
    talent_name: Optional[str] = None
    path: Optional[str] = None

    def __post_init__(self):
        self.event_type = EventType.TALENTS_CHANGED


class EventEmitter:
    """Base class for objects that can emit and listen to events"""

    def __init__(self):
        self._observers: Dict[EventType, List[Callable]] = {}
        self._event_history: List[EventData] = []

    def on(self, event_type: EventType, callback: Callable[[EventData], None]):
        """
        Register a callback for an event type

        Args:
            event_type: The type of event to listen for
            callback: Function to call when event is emitted
        """
        if event_type not in self._observers:
            self._observers[event_type] = []
        self._observers[event_type].append(callback)
        logger.debug(f"Registered callback for {event_type.value}")

    def off(self, event_type: EventType, callback: Callable[[EventData], None]):
        """
        Unregister a callback for an event type

        Args:
            event_type: The type of event
            callback: The callback to remove
        """
        if event_type in self._observers and callback in self._observers[event_type]:
            self._observers[event_type].remove(callback)
            logger.debug(f"Unregistered callback for {event_type.value}")

    def emit(self, event):
        """
        Emit an event to all registered observers

        Args:
            event: EventData instance, or a bare EventType for events without payload
        """
        if isinstance(event, EventData):
            event_data = event
            if event_data.event_type is None or not event_data.validate():
                logger.error(f"Invalid event data for {event_data.event_type}")
                return
        else:
            event_data = EventData(
                event_type=event,
                source_manager=type(self).__name__,
            )

        self._event_history.append(event_data)

        callbacks = self._observers.get(event_data.event_type, [])
        if callbacks:
            logger.debug(f"Emitting {event_data.event_type.value} from {event_data.source_manager}")
        for callback in list(callbacks):
            try:
                callback(event_data)
            except Exception:
                logger.exception(f"Error in {event_data.event_type.value} callback")

    def emit_batch(self, events: List[EventData]):
        """
        Emit multiple events in order

        Args:
            events: List of events to emit
        """
        for event in events:
            self.emit(event)

    def get_event_history(self, event_type: Optional[EventType] = None) -> List[EventData]:
        """
        Get history of emitted events

        Args:
            event_type: Optional filter by event type

        Returns:
            List of event data
        """
        if event_type:
            return [e for e in self._event_history if e.event_type == event_type]
        return self._event_history.copy()

    def clear_event_history(self):
        """Clear the event history"""
        self._event_history.clear()

"""Owner of the project's single Event.

Updates are merged without validation; required-field checks happen when the
project is saved (``validate_event_for_save``) or in the event form.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Optional

from ..utils.isotime import utcnow
from .event import Event, EventUpdate, create_default_event

logger = logging.getLogger(__name__)


class EventMetadataManager:
    def __init__(self, on_change: Optional[Callable[[], None]] = None):
        self._event: Optional[Event] = None
        self._on_change = on_change

    @property
    def event(self) -> Optional[Event]:
        return self._event

    def update_event(
        self,
        update: Optional[EventUpdate] = None,
        now: Optional[datetime] = None,
        **changes,
    ) -> Event:
        """Create the event from defaults or merge into the existing one.

        A new event gets gender=boys, ageLevel=Varsity, sport=basketball, an
        empty crew and created_on == modified_on == now, with the update laid
        over it. An existing event keeps created_on and gets modified_on = now.
        """
        if update is None:
            update = EventUpdate(**changes)
        elif changes:
            raise TypeError("pass either an EventUpdate or keyword changes, not both")
        now = now or utcnow()
        event = self._event
        if event is None:
            event = create_default_event(now)
            logger.debug("event created")
        for name, value in update.values().items():
            setattr(event, name, value)
        for name in update.clear:
            setattr(event, name, None)
        event.modified_on = max(now, event.created_on)
        self._event = event
        if self._on_change is not None:
            self._on_change()
        return event

    def replace(self, event: Optional[Event]) -> None:
        self._event = event
        if self._on_change is not None:
            self._on_change()

    def clear(self) -> None:
        self.replace(None)


__all__ = ["EventMetadataManager"]

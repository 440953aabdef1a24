"""Sequencing of startup modals so that only one is visible at a time."""

import logging
from dataclasses import dataclass
from typing import Optional

from starguide.models.enums import ModalId

logger = logging.getLogger(__name__)

# Delay before the first queue check after app load
MODAL_CHECK_DELAY_MS = 1000
# Delay between one modal closing and the next opening
MODAL_TRANSITION_DELAY_MS = 400


@dataclass
class QueuedModal:
    id: ModalId
    priority: int
    is_ready: bool = False  # The modal has decided it wants to show


class ModalQueue:
    """Single-owner queue deciding which ready modal is visible.

    Lower priority numbers win. A modal must be registered before it can be
    shown; requests for unregistered modals are ignored.
    """

    PRIORITIES = {
        ModalId.AUTH: 0,
        ModalId.FEEDBACK_NOTIFICATION: 1,
        ModalId.CHANGELOG: 2,
        ModalId.ONBOARDING: 3,
        ModalId.SURVEY: 4,
    }

    def __init__(self):
        self._modals: dict[ModalId, QueuedModal] = {}

    def register(self, modal_id: ModalId | str):
        modal_id = ModalId(modal_id)
        if modal_id not in self._modals:
            self._modals[modal_id] = QueuedModal(modal_id, self.PRIORITIES[modal_id])

    @property
    def active_modal_id(self) -> Optional[ModalId]:
        ready = [m for m in self._modals.values() if m.is_ready]
        if not ready:
            return None
        return min(ready, key=lambda m: m.priority).id

    def request_show(self, modal_id: ModalId | str) -> bool:
        """Mark a modal ready; True when it is the one that should be visible now."""
        modal = self._modals.get(ModalId(modal_id))
        if modal is None:
            logger.debug(f"Ignoring show request for unregistered modal {modal_id}")
            return False
        modal.is_ready = True
        return self.active_modal_id == modal.id

    def should_show(self, modal_id: ModalId | str) -> bool:
        modal = self._modals.get(ModalId(modal_id))
        return modal is not None and modal.is_ready and self.active_modal_id == modal.id

    def mark_closed(self, modal_id: ModalId | str):
        """Release the slot so the next ready modal can show."""
        modal = self._modals.get(ModalId(modal_id))
        if modal is not None:
            modal.is_ready = False

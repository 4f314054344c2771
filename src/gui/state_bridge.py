"""Relay orchestrator state changes onto the Qt GUI thread."""

import logging
from typing import Callable, Optional

from PyQt6.QtCore import QObject, pyqtSignal

from src.services.orchestrator import Orchestrator

logger = logging.getLogger("moltview")


class StateBridge(QObject):
    """Re-emits an orchestrator's FetchState as a Qt signal.

    Orchestrators notify from worker threads; connecting widgets to
    ``state_changed`` makes Qt queue delivery to the receiver's thread, so UI
    code never runs off the GUI thread.
    """

    state_changed = pyqtSignal(object)   # FetchState

    def __init__(self, parent=None):
        super().__init__(parent)
        self._orchestrator: Optional[Orchestrator] = None
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def orchestrator(self) -> Optional[Orchestrator]:
        return self._orchestrator

    def attach(self, orchestrator: Orchestrator) -> None:
        """Follow a new orchestrator, closing the previous one."""
        self.detach()
        self._orchestrator = orchestrator
        self._unsubscribe = orchestrator.subscribe(self.state_changed.emit)
        self.state_changed.emit(orchestrator.state)

    def detach(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        if self._orchestrator is not None:
            logger.debug(f"Closing {self._orchestrator.name} orchestrator")
            self._orchestrator.close()
            self._orchestrator = None

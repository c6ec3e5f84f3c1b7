"""
Shared bridge form state.

One ``BridgeFormContainer`` is created per mounted form and passed by
reference to every consumer (orchestrator, prefill adapter, views). Writes go
through its setters so subscribers can recompute derived values.
"""

import logging
from typing import Callable, List, Optional

from .models import Asset, Direction, TransferFormState

logger = logging.getLogger(__name__)

Listener = Callable[[TransferFormState], None]


class BridgeFormContainer:
    """Owns a ``TransferFormState`` and notifies listeners on every change."""

    def __init__(self, state: Optional[TransferFormState] = None):
        self._state = state or TransferFormState()
        self._listeners: List[Listener] = []

    @property
    def state(self) -> TransferFormState:
        return self._state

    @property
    def bridge_from_amount(self) -> str:
        return self._state.bridge_from_amount

    @property
    def recipient(self) -> str:
        return self._state.recipient

    @property
    def direction(self) -> Direction:
        return self._state.direction

    @property
    def network(self) -> str:
        return self._state.network

    @property
    def selected_asset(self) -> Optional[Asset]:
        return self._state.selected_asset

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._state)

    def set_bridge_from_amount(self, value: str) -> None:
        self._state.bridge_from_amount = value
        self._notify()

    def set_recipient(self, value: str) -> None:
        self._state.recipient = value
        self._notify()

    def set_direction(self, direction: Direction) -> None:
        self._state.direction = direction
        self._notify()

    def set_network(self, network: str) -> None:
        self._state.network = network
        self._notify()

    def set_selected_asset(self, asset: Optional[Asset]) -> None:
        self._state.selected_asset = asset
        self._notify()

    def reset_fields(self, recipient: str = "") -> None:
        """Blank the amount and set ``recipient`` in a single notification."""
        logger.debug("Resetting bridge form fields")
        self._state.bridge_from_amount = ""
        self._state.recipient = recipient
        self._notify()

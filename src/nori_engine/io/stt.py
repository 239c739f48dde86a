"""Speech-to-text input devices."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from nori_engine.models.events import InputEvent


class SttInputDevice(ABC):
    """A recognizer that listens and reports InputEvents."""

    @abstractmethod
    def try_load(self, on_event: Callable[[InputEvent], None]) -> bool:
        """Start listening if possible, sending events to on_event.

        Returns False when the device is not ready to listen.
        """


class TextInputDevice(SttInputDevice):
    """Text-only "microphone" used by the command line chat.

    Lines are typed rather than spoken, so listening just means that the next
    typed line goes to the callback registered by the last try_load().
    """

    def __init__(self) -> None:
        self._on_event: Callable[[InputEvent], None] | None = None

    @property
    def is_listening(self) -> bool:
        return self._on_event is not None

    def try_load(self, on_event: Callable[[InputEvent], None]) -> bool:
        self._on_event = on_event
        return True

    def deliver(self, event: InputEvent) -> bool:
        """Hand event to the pending listener, if any."""
        on_event, self._on_event = self._on_event, None
        if on_event is None:
            return False
        on_event(event)
        return True

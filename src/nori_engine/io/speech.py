"""Speech output devices."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable

from rich.console import Console
from rich.markup import escape


class SpeechOutputDevice(ABC):
    """Something that can say text out loud."""

    @abstractmethod
    def speak(self, speech_output: str) -> None: ...

    @abstractmethod
    def stop_speaking(self) -> None: ...

    @property
    @abstractmethod
    def is_speaking(self) -> bool: ...

    @abstractmethod
    def run_when_finished_speaking(self, callback: Callable[[], None]) -> None:
        """Run callback once whatever is being said right now has been said."""

    def cleanup(self) -> None:
        """Release any resource held by the device."""


class InstantSpeechDevice(SpeechOutputDevice):
    """A device that "speaks" instantly, e.g. because it only displays text.

    It is never speaking, so callbacks run right away.
    """

    @property
    def is_speaking(self) -> bool:
        return False

    def stop_speaking(self) -> None:
        pass

    def run_when_finished_speaking(self, callback: Callable[[], None]) -> None:
        callback()


class NothingSpeechDevice(InstantSpeechDevice):
    def speak(self, speech_output: str) -> None:
        pass


class ConsoleSpeechDevice(InstantSpeechDevice):
    """Prints speech to the terminal."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console()

    def speak(self, speech_output: str) -> None:
        self._console.print(f"[bold cyan]Nori:[/bold cyan] {escape(speech_output)}")

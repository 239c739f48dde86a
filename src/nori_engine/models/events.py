"""Events produced by a speech-to-text device and consumed by the evaluator."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class InputEvent(BaseModel):
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class Final(InputEvent):
    """The user finished speaking.

    utterances are (text, confidence) alternatives, most likely first.
    """

    utterances: list[tuple[str, float]] = Field(min_length=1)

    @classmethod
    def of(cls, *texts: str) -> Final:
        """Build an event from plain texts, with decreasing confidence."""
        return cls(utterances=[(text, max(0.0, 1.0 - i * 0.1)) for i, text in enumerate(texts)])


class Partial(InputEvent):
    """The user is still speaking; utterance is the best guess so far."""

    utterance: str


class NoInput(InputEvent):
    """Listening stopped without anything being said."""


class Error(InputEvent):
    """The recognition engine failed."""

    cause: BaseException

"""Phone calls by contact name, with confirmation and contact choice sub-dialogues."""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, Field
from rapidfuzz.distance import Levenshtein

from nori_engine.models.score import Score, Specificity
from nori_engine.recognizer.fuzzy import Capture, FuzzyRecognizerSkill, Pattern, normalize
from nori_engine.skill.base import Permission, Skill, SkillInfo
from nori_engine.skill.context import SkillContext
from nori_engine.skill.output import SkillOutput
from nori_engine.skill.plan import (
    FinishInteraction,
    InteractionPlan,
    ReplaceSubInteraction,
    StartSubInteraction,
)
from nori_engine.skills.common import RecognizeYesNoSkill

logger = logging.getLogger(__name__)

MAX_CONTACTS = 5


class Contact(BaseModel):
    name: str
    numbers: list[str] = Field(default_factory=list)
    distance: int = 0  # edit distance from the searched name, lower is closer


def contact_distance(query: str, name: str) -> int:
    """Edit distance between query and the full name or any single word of it."""
    query = normalize(query)
    name = normalize(name)
    candidates = [name, *name.split(" ")]
    return min(Levenshtein.distance(query, candidate) for candidate in candidates)


class ContactBook(ABC):
    @abstractmethod
    def search(self, query: str) -> list[Contact]:
        """Contacts whose name resembles query, closest first."""


class InMemoryContactBook(ContactBook):
    """A contact book backed by a name -> numbers mapping."""

    def __init__(self, contacts: Mapping[str, list[str]]) -> None:
        self._contacts = dict(contacts)

    def search(self, query: str) -> list[Contact]:
        max_distance = len(normalize(query)) // 2
        found = []
        for name, numbers in self._contacts.items():
            distance = contact_distance(query, name)
            if distance <= max_distance:
                found.append(Contact(name=name, numbers=list(numbers), distance=distance))
        found.sort(key=lambda contact: contact.distance)
        return found


class Dialer(ABC):
    @abstractmethod
    async def call(self, number: str) -> None:
        """Start a phone call to number."""


class LoggingDialer(Dialer):
    """A dialer for environments without a phone: the call only gets logged."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    async def call(self, number: str) -> None:
        logger.info("Calling %s", number)
        self.calls.append(number)


# Outputs


class ConfirmedCallOutput(SkillOutput):
    def __init__(self, number: str | None) -> None:
        self.number = number

    def get_speech_output(self, ctx: SkillContext) -> str:
        if self.number is None:
            return "Okay, I won't call"
        # The call has started, nothing to say
        return ""

    def render(self, ctx: SkillContext) -> str:
        if self.number is None:
            return "Not calling"
        return f"Calling {self.number}"


class ConfirmCallSkill(RecognizeYesNoSkill):
    def __init__(self, skill_info: SkillInfo, number: str, dialer: Dialer) -> None:
        super().__init__(skill_info)
        self.number = number
        self.dialer = dialer

    async def on_answer(self, ctx: SkillContext, answer: bool) -> SkillOutput:
        if answer:
            await self.dialer.call(self.number)
            return ConfirmedCallOutput(self.number)
        return ConfirmedCallOutput(None)


class ConfirmCallOutput(SkillOutput):
    """Asks whether to call name, then waits for a yes or a no."""

    def __init__(self, skill_info: SkillInfo, name: str, number: str, dialer: Dialer) -> None:
        self.skill_info = skill_info
        self.name = name
        self.number = number
        self.dialer = dialer

    def get_speech_output(self, ctx: SkillContext) -> str:
        return f"Should I call {self.name}?"

    def get_interaction_plan(self, ctx: SkillContext) -> InteractionPlan:
        return ReplaceSubInteraction(
            next_skills=[ConfirmCallSkill(self.skill_info, self.number, self.dialer)],
            reopen_microphone=True,
        )

    def render(self, ctx: SkillContext) -> str:
        return f"{self.get_speech_output(ctx)}\n{self.number}"


class TelephoneOutput(SkillOutput):
    """Lists the contacts that may have been meant, so that the user picks one."""

    def __init__(self, skill_info: SkillInfo, contacts: list[Contact], dialer: Dialer) -> None:
        self.skill_info = skill_info
        self.contacts = contacts
        self.dialer = dialer

    def get_speech_output(self, ctx: SkillContext) -> str:
        if not self.contacts:
            return "I couldn't find that contact"
        return f"I found {len(self.contacts)} contacts, which one should I call?"

    def get_interaction_plan(self, ctx: SkillContext) -> InteractionPlan:
        if not self.contacts:
            return FinishInteraction()
        # A spoken name can't tell numbers apart, so it picks the first one
        by_name = [(contact.name, contact.numbers[0]) for contact in self.contacts]
        by_index = [(contact.name, number) for contact in self.contacts for number in contact.numbers]
        return StartSubInteraction(
            next_skills=[
                ContactChooserName(self.skill_info, by_name, self.dialer),
                ContactChooserIndex(self.skill_info, by_index, self.dialer),
            ],
            reopen_microphone=True,
        )

    def render(self, ctx: SkillContext) -> str:
        if not self.contacts:
            return self.get_speech_output(ctx)
        lines = []
        index = 1
        for contact in self.contacts:
            lines.append(contact.name)
            for number in contact.numbers:
                lines.append(f"  {index}. {number}")
                index += 1
        return "\n".join(lines)


# Contact choice


_NUMBER_WORDS = {
    "one": 1, "two": 2, "three": 3, "four": 4, "five": 5, "six": 6, "seven": 7,
    "eight": 8, "nine": 9, "ten": 10, "eleven": 11, "twelve": 12,
    "first": 1, "second": 2, "third": 3, "fourth": 4, "fifth": 5, "sixth": 6,
    "seventh": 7, "eighth": 8, "ninth": 9, "tenth": 10, "eleventh": 11, "twelfth": 12,
    "last": -1,
}  # fmt: skip

_NUMERIC_TOKEN = re.compile(r"^(\d+)(?:st|nd|rd|th)?$")


def extract_index(text: str) -> int | None:
    """The first number or ordinal said in text ("the second one" -> 2), if any.

    "last" is returned as -1.
    """
    for token in normalize(text).split(" "):
        match = _NUMERIC_TOKEN.match(token)
        if match:
            return int(match.group(1))
        if token in _NUMBER_WORDS:
            return _NUMBER_WORDS[token]
    return None


class ContactChooserIndex(Skill[int]):
    """Picks a number by its position in the list ("the second one")."""

    def __init__(
        self, skill_info: SkillInfo, contacts: list[tuple[str, str]], dialer: Dialer
    ) -> None:
        super().__init__(skill_info, Specificity.HIGH)
        self.contacts = contacts
        self.dialer = dialer

    def score(self, ctx: SkillContext, text: str) -> tuple[Score, int]:
        index = extract_index(text) or 0
        if index == -1:
            index = len(self.contacts)
        if 1 <= index <= len(self.contacts):
            return Score.always_best(), index
        return Score.always_worst(), index

    async def generate_output(self, ctx: SkillContext, input_data: int) -> SkillOutput:
        if not 1 <= input_data <= len(self.contacts):
            return ConfirmedCallOutput(None)
        name, number = self.contacts[input_data - 1]
        return ConfirmCallOutput(self.skill_info, name, number, self.dialer)


class ContactChooserName(Skill[tuple[str, str] | None]):
    """Picks a contact by saying its name again.

    LOW specificity, so that the index chooser wins when both understand.
    """

    def __init__(
        self, skill_info: SkillInfo, contacts: list[tuple[str, str]], dialer: Dialer
    ) -> None:
        super().__init__(skill_info, Specificity.LOW)
        self.contacts = contacts
        self.dialer = dialer

    def score(self, ctx: SkillContext, text: str) -> tuple[Score, tuple[str, str] | None]:
        max_distance = max(1, len(normalize(text)) // 4)
        best: tuple[str, str] | None = None
        best_distance = max_distance + 1
        for contact in self.contacts:
            distance = contact_distance(text, contact[0])
            if distance < best_distance:
                best, best_distance = contact, distance
        if best is None:
            return Score.always_worst(), None
        return Score.always_best(), best

    async def generate_output(
        self, ctx: SkillContext, input_data: tuple[str, str] | None
    ) -> SkillOutput:
        if input_data is None:
            return ConfirmedCallOutput(None)
        name, number = input_data
        return ConfirmCallOutput(self.skill_info, name, number, self.dialer)


# Skill


def _who(capture: Capture | None) -> str:
    if capture is None:
        raise ValueError("The call pattern always captures who to call")
    return (capture.group("who") or "").strip()


_CALL_PATTERNS: list[Pattern[Any]] = [
    Pattern(
        name="call",
        examples=["call mom", "phone mom", "dial mom", "make a call to mom"],
        expression=r"\b(?:make a call to|call|phone|dial|ring)\s+(?P<who>.+)",
        builder=_who,
    ),
]


class TelephoneSkill(FuzzyRecognizerSkill[str]):
    def __init__(self, skill_info: SkillInfo, contact_book: ContactBook, dialer: Dialer) -> None:
        super().__init__(skill_info, Specificity.LOW)
        self.contact_book = contact_book
        self.dialer = dialer

    @property
    def patterns(self) -> list[Pattern[Any]]:
        return _CALL_PATTERNS

    async def generate_output(self, ctx: SkillContext, input_data: str) -> SkillOutput:
        contacts = self.contact_book.search(input_data.strip())
        valid: list[Contact] = []

        for i, contact in enumerate(contacts):
            if len(valid) >= MAX_CONTACTS:
                break
            if not contact.numbers:
                continue
            # A clear winner is called right away, without listing the others
            if (
                not valid
                and contact.distance < 3
                and len(contact.numbers) == 1
                and (i + 1 >= len(contacts) or contacts[i + 1].distance - 2 > contact.distance)
            ):
                return ConfirmCallOutput(
                    self.skill_info, contact.name, contact.numbers[0], self.dialer
                )
            valid.append(contact)

        if len(valid) == 1 and len(valid[0].numbers) == 1:
            return ConfirmCallOutput(self.skill_info, valid[0].name, valid[0].numbers[0], self.dialer)
        return TelephoneOutput(self.skill_info, valid, self.dialer)


class TelephoneInfo(SkillInfo):
    needed_permissions = (Permission.READ_CONTACTS, Permission.CALL_PHONE)

    def __init__(self, contact_book: ContactBook, dialer: Dialer) -> None:
        super().__init__("telephone")
        self.contact_book = contact_book
        self.dialer = dialer

    def name(self) -> str:
        return "Telephone"

    def sentence_example(self) -> str:
        return "Call mom"

    def is_available(self, ctx: SkillContext) -> bool:
        return True

    def build(self, ctx: SkillContext) -> Skill:
        return TelephoneSkill(self, self.contact_book, self.dialer)

"""Tests for the fuzzy pattern recognizer."""

import pytest

from nori_engine.models.score import Score, ScoreKind, Specificity
from nori_engine.recognizer.fuzzy import (
    FuzzyRecognizerSkill,
    Pattern,
    normalize,
    normalize_with_offsets,
    score_patterns,
    similarity,
)
from nori_engine.skill.context import SkillContext
from nori_engine.skills.fallback import TextFallbackInfo


def _who(capture):
    return capture.group("who")


_CALL = Pattern(
    name="call",
    examples=["call mom"],
    expression=r"\bcall\s+(?P<who>.+)",
    builder=_who,
)


class TestNormalize:
    def test_lowercases_and_strips_diacritics(self) -> None:
        assert normalize("Crème Brûlée") == "creme brulee"

    def test_punctuation_becomes_single_spaces(self) -> None:
        assert normalize("what's   the time?!") == "what s the time"

    def test_trims(self) -> None:
        assert normalize("  ...hello, world...  ") == "hello world"

    @pytest.mark.parametrize(
        "text",
        [
            "Ça va? Très bien!",
            "  WHAT'S the weather in São Paulo ",
            "",
            "¿Qué?",
            "naïve/café",
            "ℌ",
            "\U0001d400\U0001d401",
            "İstanbul",
        ],
    )
    def test_idempotent(self, text: str) -> None:
        assert normalize(normalize(text)) == normalize(text)

    def test_compatibility_letters_are_lowercased(self) -> None:
        assert normalize("ℌello") == "hello"
        assert normalize("\U0001d400\U0001d401") == "ab"

    def test_offsets_point_at_raw_characters(self) -> None:
        normalized, offsets = normalize_with_offsets("Hé, Jo")
        assert normalized == "he jo"
        assert len(offsets) == len(normalized)
        assert [("Hé, Jo")[i] for i in offsets] == ["H", "é", ",", "J", "o"]


class TestSimilarity:
    def test_identical(self) -> None:
        assert similarity("call mom", "call mom") == 1.0

    def test_both_empty(self) -> None:
        assert similarity("", "") == 1.0

    def test_normalized_by_longest(self) -> None:
        assert similarity("abcd", "abcf") == pytest.approx(0.75)
        assert similarity("", "abcd") == 0.0


class TestScorePatterns:
    def test_exact_example_scores_one(self) -> None:
        patterns = [Pattern(name="time", examples=["what time is it", "tell me the time"])]
        score, data = score_patterns(patterns, "tell me the time")
        assert score == Score.numeric(1.0)
        assert data == "time"

    def test_case_and_punctuation_are_ignored(self) -> None:
        patterns = [Pattern(name="time", examples=["what time is it"])]
        score, _ = score_patterns(patterns, "What time is it?")
        assert score == Score.numeric(1.0)

    def test_empty_pattern_list_is_always_worst(self) -> None:
        score, data = score_patterns([], "anything")
        assert score.kind == ScoreKind.ALWAYS_WORST
        assert data is None

    def test_non_matching_expression_skips_pattern(self) -> None:
        # The example would match perfectly, but the expression does not
        score, data = score_patterns([_CALL], "dial mom")
        assert score.kind == ScoreKind.ALWAYS_WORST
        assert data is None

    def test_expression_match_floors_score_at_one(self) -> None:
        score, data = score_patterns([_CALL], "please call my old friend Bob")
        assert score == Score.numeric(1.0)
        assert data == "my old friend Bob"

    def test_capture_keeps_raw_casing_and_diacritics(self) -> None:
        _, data = score_patterns([_CALL], "Call José María!")
        assert data == "José María"

    def test_ties_go_to_first_pattern(self) -> None:
        patterns = [
            Pattern(name="first", examples=["hello there"]),
            Pattern(name="second", examples=["hello there"]),
        ]
        _, data = score_patterns(patterns, "hello there")
        assert data == "first"

    def test_best_pattern_wins(self) -> None:
        patterns = [
            Pattern(name="year", examples=["what year is it"]),
            Pattern(name="month", examples=["what month is it"]),
        ]
        score, data = score_patterns(patterns, "what month is it")
        assert data == "month"
        assert score == Score.numeric(1.0)

    def test_builder_without_expression_gets_none(self) -> None:
        received = []
        patterns = [Pattern(name="p", examples=["x"], builder=lambda c: received.append(c) or 1)]
        _, data = score_patterns(patterns, "x")
        assert received == [None]
        assert data == 1


class _EchoSkill(FuzzyRecognizerSkill[str]):
    @property
    def patterns(self) -> list[Pattern]:
        return [Pattern(name="echo", examples=["echo"])]

    async def generate_output(self, ctx, input_data):
        raise NotImplementedError


def test_fuzzy_recognizer_skill_scores_with_its_patterns() -> None:
    skill = _EchoSkill(TextFallbackInfo(), Specificity.HIGH)
    score, data = skill.score(SkillContext(), "Echo!")
    assert score == Score.numeric(1.0)
    assert data == "echo"

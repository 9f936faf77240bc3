"""
Rule-based content moderation for questions, edits and answers.
"""

import re
from dataclasses import dataclass
from typing import Iterable

from askbot.core.config import DEFAULT_BANNED_WORDS

MAX_TEXT_LENGTH = 2000
CAPS_RATIO_LIMIT = 0.7
CAPS_MIN_LENGTH = 20

# One character followed by ten or more copies of itself
REPETITION_PATTERN = re.compile(r"(.)\1{10,}", re.DOTALL)


@dataclass(frozen=True)
class Verdict:
    allowed: bool
    reason: str = ""


ALLOWED = Verdict(True)


class ContentModerator:
    """
    Stateless text gate.

    Rules run in a fixed order and the first failing rule decides the verdict:
    banned content, length, shouting, repetition.
    """

    def __init__(self, banned_words: Iterable[str] = DEFAULT_BANNED_WORDS, max_length: int = MAX_TEXT_LENGTH):
        self.banned_words = tuple(word.lower() for word in banned_words)
        self.max_length = max_length

    def evaluate(self, text: str) -> Verdict:
        lowered = text.lower()
        if any(word in lowered for word in self.banned_words):
            return Verdict(False, "Contains banned content")

        if len(text) > self.max_length:
            return Verdict(False, f"Content too long (max {self.max_length} characters)")

        if len(text) > CAPS_MIN_LENGTH:
            capitals = sum(1 for char in text if "A" <= char <= "Z")
            if capitals / len(text) > CAPS_RATIO_LIMIT:
                return Verdict(False, "Too many capital letters")

        if REPETITION_PATTERN.search(text):
            return Verdict(False, "Repetitive text detected")

        return ALLOWED

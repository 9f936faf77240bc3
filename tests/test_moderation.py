import pytest

from askbot.core.config import DEFAULT_BANNED_WORDS
from askbot.core.moderation import ContentModerator


@pytest.fixture
def moderator():
    return ContentModerator()


class TestContentModerator:
    def test_plain_question_is_allowed(self, moderator):
        verdict = moderator.evaluate("How do I tell my parents I want to change careers?")
        assert verdict.allowed
        assert verdict.reason == ""

    @pytest.mark.parametrize("word", DEFAULT_BANNED_WORDS)
    def test_banned_substring_rejected_in_any_case(self, moderator, word):
        for variant in (word, word.upper(), word.title()):
            verdict = moderator.evaluate(f"check this out {variant} now")
            assert not verdict.allowed
            assert verdict.reason == "Contains banned content"

    def test_banned_substring_inside_a_word(self, moderator):
        assert not moderator.evaluate("this is a SCAMMER").allowed

    def test_length_limit(self, moderator):
        at_limit = "abcdefghij" * 200
        assert len(at_limit) == 2000
        assert moderator.evaluate(at_limit).allowed

        verdict = moderator.evaluate(at_limit + "k")
        assert not verdict.allowed
        assert verdict.reason == "Content too long (max 2000 characters)"

    def test_banned_rule_runs_before_length(self, moderator):
        verdict = moderator.evaluate("spam " + "abcdefghij" * 300)
        assert verdict.reason == "Contains banned content"

    def test_shouting_rejected_above_twenty_characters(self, moderator):
        verdict = moderator.evaluate("WHY IS EVERYONE SO LOUD")
        assert not verdict.allowed
        assert verdict.reason == "Too many capital letters"

    def test_short_shouting_allowed(self, moderator):
        text = "WHY IS IT SO LOUD"
        assert len(text) <= 20
        assert moderator.evaluate(text).allowed

    def test_mostly_lowercase_allowed(self, moderator):
        assert moderator.evaluate("Is NASA hiring interns this year?").allowed

    def test_fifteen_repeated_characters_rejected(self, moderator):
        verdict = moderator.evaluate("AAAAAAAAAAAAAAA")
        assert not verdict.allowed
        assert verdict.reason == "Repetitive text detected"

    def test_eleven_repeats_rejected_ten_allowed(self, moderator):
        assert not moderator.evaluate("so g" + "o" * 11 + "d").allowed
        assert moderator.evaluate("h" + "m" * 10 + " okay").allowed

    def test_repeated_punctuation_rejected(self, moderator):
        assert not moderator.evaluate("what?????????????").allowed

    def test_custom_configuration(self):
        moderator = ContentModerator(banned_words=["Casino"], max_length=10)
        assert moderator.evaluate("spam").allowed
        assert not moderator.evaluate("casino").allowed
        assert moderator.evaluate("eleven char").reason == "Content too long (max 10 characters)"

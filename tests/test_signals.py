from __future__ import annotations

from pathlib import Path

from agents.signals import get_vocabulary, load_vocabulary


def test_shipped_vocabulary_loads() -> None:
    vocabulary = get_vocabulary()
    assert vocabulary.version == 1
    assert "wish" in vocabulary.request
    assert "frustrat" in vocabulary.negative
    assert "love" in vocabulary.positive
    assert len(vocabulary.buying_signals) == 20
    assert vocabulary.buying_signals[0] == "looking for"


def test_entries_are_lowercased_so_mixed_case_phrases_match() -> None:
    vocabulary = get_vocabulary()
    assert "should i buy" in vocabulary.buying_signals
    assert vocabulary.buying_signal("Should I buy this or wait?") == "should i buy"


def test_sentiment_priority_is_request_negative_positive() -> None:
    vocabulary = get_vocabulary()
    assert vocabulary.classify_sentiment("I love it but I wish it had dark mode") == "request"
    assert vocabulary.classify_sentiment("I love the idea but it is broken") == "negative"
    assert vocabulary.classify_sentiment("AMAZING video") == "positive"
    assert vocabulary.classify_sentiment("first") == "neutral"
    assert vocabulary.classify_sentiment("I wish they added export, the current one is terrible") == "request"


def test_substring_matching_is_literal() -> None:
    vocabulary = get_vocabulary()
    # "feature" is a request word, so any mention of features counts
    assert vocabulary.classify_sentiment("This feature is great") == "request"
    # "vs" matches inside other words
    assert vocabulary.buying_signal("devs use it daily") == "vs"


def test_buying_signal_reports_first_phrase_in_list_order() -> None:
    vocabulary = get_vocabulary()
    text = "Any suggestions? Looking for a replacement with good pricing"
    assert vocabulary.buying_signal(text) == "looking for"
    assert vocabulary.buying_signal("nice video") is None


def test_load_vocabulary_from_custom_file(tmp_path: Path) -> None:
    path = tmp_path / "signals.yaml"
    path.write_text(
        "version: 7\n"
        "sentiment:\n"
        "  request: [Gimme]\n"
        "  negative: [meh]\n"
        "buying_signals: [Shut Up And Take My Money]\n",
        encoding="utf-8",
    )
    vocabulary = load_vocabulary(path)
    assert vocabulary.version == 7
    assert vocabulary.positive == ()
    assert vocabulary.classify_sentiment("gimme gimme") == "request"
    assert vocabulary.buying_signal("shut up and take my money!") == "shut up and take my money"

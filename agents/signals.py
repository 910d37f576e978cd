"""
Signal vocabularies - the word lists behind comment classification.

Loaded from signals.yaml next to this module so the lists can be tuned
(and pinned in tests) without touching agent control flow.
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).parent / "signals.yaml"


@dataclass(frozen=True)
class SignalVocabulary:
    version: int
    request: tuple[str, ...]
    negative: tuple[str, ...]
    positive: tuple[str, ...]
    buying_signals: tuple[str, ...]

    def classify_sentiment(self, text: str) -> str:
        """request > negative > positive, else neutral."""
        lower = text.lower()
        if any(s in lower for s in self.request):
            return "request"
        if any(s in lower for s in self.negative):
            return "negative"
        if any(s in lower for s in self.positive):
            return "positive"
        return "neutral"

    def buying_signal(self, text: str) -> Optional[str]:
        """First buying-signal phrase found in `text`, or None."""
        lower = text.lower()
        for phrase in self.buying_signals:
            if phrase in lower:
                return phrase
        return None


def _words(section: dict, key: str) -> tuple[str, ...]:
    values = section.get(key) or []
    return tuple(str(v).lower() for v in values)


def load_vocabulary(path: Path = CONFIG_PATH) -> SignalVocabulary:
    """Read a vocabulary file. Raises if the file is missing or malformed."""
    with open(path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    sentiment = config.get("sentiment") or {}
    vocabulary = SignalVocabulary(
        version=int(config.get("version", 0)),
        request=_words(sentiment, "request"),
        negative=_words(sentiment, "negative"),
        positive=_words(sentiment, "positive"),
        buying_signals=_words(config, "buying_signals"),
    )
    logger.debug(f"Loaded signal vocabulary v{vocabulary.version} from {path}")
    return vocabulary


@lru_cache(maxsize=1)
def get_vocabulary() -> SignalVocabulary:
    """The shipped vocabulary, loaded once."""
    return load_vocabulary()

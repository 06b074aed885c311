"""Topic name and topic condition validation.

FCM accepts conditions such as::

    "'TopicA' in topics && ('TopicB' in topics || 'TopicC' in topics)"

Anything outside that small grammar must be rejected before a request is
built, so these helpers are pure and never touch the network.
"""

from __future__ import annotations

import re
from typing import Any, List

TOPIC_NAME_PATTERN = r"[a-zA-Z0-9\-_.~%]+"

_TOPIC_NAME_RE = re.compile(TOPIC_NAME_PATTERN)
_CONDITION_TOKENS_RE = re.compile(
    r"(topics|in|\s|\(|\)|(&&)|!|(\|\|)|'(" + TOPIC_NAME_PATTERN + r")')",
    re.ASCII,
)
_QUOTED_TOPIC_RE = re.compile(r"(?:^|\S|\s)'([^']*?)'(?:$|\S|\s)", re.ASCII)


def validate_topic(topic: Any) -> bool:
    """Return True if ``topic`` is a usable topic name."""
    if not isinstance(topic, str) or not topic:
        return False
    return _TOPIC_NAME_RE.fullmatch(topic) is not None


def validate_condition_format(condition: str) -> bool:
    """Return True if only condition tokens and quoted topics remain."""
    return _CONDITION_TOKENS_RE.sub("", condition) == ""


def extract_condition_topics(condition: str) -> List[str]:
    """Return the single-quoted topic names found in ``condition``."""
    return _QUOTED_TOPIC_RE.findall(condition)


def validate_condition_topics(condition: str) -> bool:
    """Return True if every quoted topic only uses allowed characters."""
    return all(
        _TOPIC_NAME_RE.sub("", topic) == ""
        for topic in extract_condition_topics(condition)
    )


def validate_condition(condition: Any) -> bool:
    """Return True if ``condition`` passes both the format and topic checks."""
    if not isinstance(condition, str):
        return False
    return validate_condition_format(condition) and validate_condition_topics(
        condition
    )


__all__ = [
    "TOPIC_NAME_PATTERN",
    "extract_condition_topics",
    "validate_condition",
    "validate_condition_format",
    "validate_condition_topics",
    "validate_topic",
]

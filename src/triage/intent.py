"""
Intent Classification
=====================

Deterministic, rule-based classification of item titles into a destination
routing key and an urgency tier. Nothing here touches the network, so the
result can be recomputed on every read instead of being stored remotely.
"""

from __future__ import annotations

from typing import Iterable

from .catalog import URGENCY_KEYWORDS
from .models import DEFAULT_KEY, Matcher, ParsedIntent, RoutingKey, RoutingRule, UrgencyLevel

DEFAULT_URGENCY: UrgencyLevel = "medium"


def _normalize(value: str) -> str:
    return value.strip().lower()


def _matches(matchers: Iterable[Matcher], normalized: str, raw: str) -> bool:
    """
    Plain strings are case-insensitive substrings of the normalized title;
    patterns are searched against the raw title.
    """
    for matcher in matchers:
        if isinstance(matcher, str):
            if matcher.lower() in normalized:
                return True
        elif matcher.search(raw):
            return True
    return False


def detect_target_list(title: str, catalog: Iterable[RoutingRule]) -> RoutingKey:
    """Return the key of the first rule matching the title, else ``default``."""
    normalized = _normalize(title)
    for rule in catalog:
        if _matches(rule.matchers, normalized, title):
            return rule.key
    return DEFAULT_KEY


def detect_urgency(title: str) -> UrgencyLevel:
    """Return the first urgency tier matching the title, else ``medium``."""
    normalized = _normalize(title)
    for level, matchers in URGENCY_KEYWORDS:
        if _matches(matchers, normalized, title):
            return level
    return DEFAULT_URGENCY


def parse_task_intent(title: str, catalog: Iterable[RoutingRule]) -> ParsedIntent:
    """Classify a title. Never raises; unknown input yields default/medium."""
    title = title or ""
    return ParsedIntent(
        target_list=detect_target_list(title, catalog),
        urgency=detect_urgency(title),
    )


def describe_intent(intent: ParsedIntent) -> str:
    """Audit line appended to notes when an item is routed."""
    return f"Target: {intent.target_list} | Urgency: {intent.urgency}"

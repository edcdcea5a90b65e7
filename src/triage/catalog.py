"""
Routing Catalog
===============

Static configuration for triage: the ordered destination rules, the urgency
keyword table, and the well-known identities of the default list.

Rule order is significant. The classifier walks the rules top to bottom and
the first rule with a matching matcher wins.
"""

from __future__ import annotations

import re

from common.config import Settings

from .models import Matcher, RoutingRule, UrgencyLevel

DEFAULT_LIST_SENTINEL = "@default"
DEFAULT_LIST_TITLE = "my tasks"

URGENCY_KEYWORDS: tuple[tuple[UrgencyLevel, tuple[Matcher, ...]], ...] = (
    (
        "high",
        (
            "this week",
            re.compile("🔥"),
            re.compile(r"urgent", re.IGNORECASE),
            re.compile(r"today", re.IGNORECASE),
        ),
    ),
    (
        "medium",
        (
            "next week",
            re.compile(r"soon", re.IGNORECASE),
            re.compile(r"upcoming", re.IGNORECASE),
        ),
    ),
    (
        "low",
        (
            "later",
            re.compile(r"someday", re.IGNORECASE),
            re.compile(r"eventually", re.IGNORECASE),
            re.compile("🧊"),
        ),
    ),
)


def build_routing_catalog(settings: Settings) -> tuple[RoutingRule, ...]:
    """Return the destination rules in precedence order."""
    return (
        RoutingRule(
            key="family",
            label="Family",
            tasklist_id=settings.FAMILY_TASKLIST_ID,
            matchers=("family", re.compile("👨‍👩‍👧‍👦"), re.compile("👪")),
        ),
        RoutingRule(
            key="home_improvement",
            label="Home Improvement",
            tasklist_id=settings.HOME_IMPROVEMENT_TASKLIST_ID,
            matchers=("home improvement", re.compile("🛠️")),
        ),
        RoutingRule(
            key="home_maintenance",
            label="Home Maintenance",
            tasklist_id=settings.HOME_MAINTENANCE_TASKLIST_ID,
            matchers=("home maintenance", re.compile("🧽"), re.compile("🧰")),
        ),
        RoutingRule(
            key="square",
            label="Square",
            tasklist_id=settings.SQUARE_TASKLIST_ID,
            matchers=("square", re.compile("🏢")),
        ),
    )


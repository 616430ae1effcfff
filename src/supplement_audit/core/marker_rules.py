"""
Dictionary-based registry of description marker rules.
Allows easy addition and management of keyword classifiers.
"""

import re
from dataclasses import dataclass, field

from .models import WorkType


@dataclass
class MarkerRule:
    """A set of regex markers that identify one kind of work."""

    rule_id: str
    work_type: WorkType
    patterns: list[str] = field(default_factory=list)
    priority: int = 0
    enabled: bool = True
    description: str = ""


@dataclass(frozen=True)
class MarkerHit:
    """The rule and marker text that matched a description."""

    rule_id: str
    work_type: WorkType
    marker: str


class MarkerRegistry:
    """
    Registry of marker rules with compiled pattern caching.

    Rules are evaluated in descending priority; the first rule with a
    matching pattern wins.
    """

    def __init__(self) -> None:
        self._rules: dict[str, MarkerRule] = {}
        self._pattern_cache: dict[str, re.Pattern[str]] = {}

    def add_rule(self, rule: MarkerRule) -> None:
        """Add a rule, replacing any rule with the same ID."""
        self._rules[rule.rule_id] = rule
        for pattern in rule.patterns:
            self._compile(pattern)

    def remove_rule(self, rule_id: str) -> bool:
        """Remove a rule from the registry."""
        if rule_id not in self._rules:
            return False
        del self._rules[rule_id]
        return True

    def get_rule(self, rule_id: str) -> MarkerRule | None:
        return self._rules.get(rule_id)

    def enable_rule(self, rule_id: str) -> bool:
        if rule_id in self._rules:
            self._rules[rule_id].enabled = True
            return True
        return False

    def disable_rule(self, rule_id: str) -> bool:
        if rule_id in self._rules:
            self._rules[rule_id].enabled = False
            return True
        return False

    def _compile(self, pattern: str) -> re.Pattern[str]:
        if pattern not in self._pattern_cache:
            self._pattern_cache[pattern] = re.compile(pattern, re.IGNORECASE)
        return self._pattern_cache[pattern]

    def active_rules(self) -> list[MarkerRule]:
        """Enabled rules, highest priority first."""
        rules = [rule for rule in self._rules.values() if rule.enabled]
        return sorted(rules, key=lambda rule: rule.priority, reverse=True)

    def match(self, text: str | None) -> MarkerHit | None:
        """Find the highest-priority rule with a marker present in text."""
        if not text:
            return None
        for rule in self.active_rules():
            for pattern in rule.patterns:
                found = self._compile(pattern).search(text)
                if found:
                    return MarkerHit(
                        rule_id=rule.rule_id,
                        work_type=rule.work_type,
                        marker=found.group(0),
                    )
        return None

    def list_rules(self) -> list[dict[str, object]]:
        """List all rules with their status."""
        return [
            {
                "rule_id": rule.rule_id,
                "work_type": rule.work_type.value,
                "priority": rule.priority,
                "enabled": rule.enabled,
                "patterns": list(rule.patterns),
                "description": rule.description,
            }
            for rule in self._rules.values()
        ]

"""
Rule Sets

A Rules instance is the set of rules that a policy decision attached to one
resource for one request. Rules are keyed by name; adding a rule under an
existing name replaces it.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Generic, TypeVar, TYPE_CHECKING

from recordgate.rules.rule import Rule

if TYPE_CHECKING:
    from recordgate.reader.models import User, Context

logger = logging.getLogger(__name__)

T = TypeVar("T")

NO_RULES_SET = "no rules set"


class Rules(Generic[T]):
    """
    Named collection of record rules.

    Iteration yields rules in insertion order, which is the order they are
    applied to each record.
    """

    def __init__(self, message: str = NO_RULES_SET):
        self.message = message
        self._rules: dict[str, Rule[T]] = {}

    def add_rule(self, name: str, rule: Rule[T]) -> "Rules[T]":
        if not name:
            raise ValueError("Rule name is required")
        if name in self._rules:
            logger.debug(f"Replacing rule {name}")
        self._rules[name] = rule
        return self

    def add_rules(self, rules: Mapping[str, Rule[T]]) -> "Rules[T]":
        for name, rule in rules.items():
            self.add_rule(name, rule)
        return self

    @property
    def rules(self) -> dict[str, Rule[T]]:
        """Copy of the name -> rule mapping."""
        return dict(self._rules)

    def contains_rules(self) -> bool:
        return bool(self._rules)

    def applicable(self, user: User, context: Context) -> list[Rule[T]]:
        """Rules that take effect for this user and context, in order."""
        return [rule for rule in self._rules.values() if rule.is_applicable(user, context)]

    def any_applicable(self, user: User, context: Context) -> bool:
        """Whether at least one rule takes effect; stops at the first hit."""
        return any(rule.is_applicable(user, context) for rule in self._rules.values())

    def __iter__(self) -> Iterator[Rule[T]]:
        return iter(list(self._rules.values()))

    def __len__(self) -> int:
        return len(self._rules)

    def __contains__(self, name: object) -> bool:
        return name in self._rules

    def __repr__(self) -> str:
        return f"Rules(message={self.message!r}, rules={list(self._rules)})"

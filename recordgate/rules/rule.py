"""
Record Rules

A rule is a predicate-plus-transform applied to each record of a resource,
conditioned on the requesting user and the declared context.

Rule contract:
- is_applicable(user, context): whether this rule has any effect for the
  request at all. Readers skip de/serialisation entirely when no rule in a
  rule set is applicable.
- apply(record, user, context): returns the (possibly redacted) record, or
  None to drop it from the output.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Generic, TypeVar, TYPE_CHECKING

if TYPE_CHECKING:
    from recordgate.reader.models import User, Context

T = TypeVar("T")

Applicability = Callable[["User", "Context"], bool]


class Rule(ABC, Generic[T]):
    """
    Base class for rules.

    Override apply() to implement record filtering or redaction, and
    is_applicable() when the rule only concerns some users or purposes.
    """

    @property
    def name(self) -> str:
        return self.__class__.__name__

    def is_applicable(self, user: User, context: Context) -> bool:
        return True

    @abstractmethod
    def apply(self, record: T, user: User, context: Context) -> T | None:
        """
        Apply this rule to a single record.

        Returns:
            The record to release (possibly modified), or None to drop it
        """
        ...


class PredicateRule(Rule[T]):
    """
    Keeps records for which the predicate holds, drops the rest.

    The predicate receives (record, user, context).
    """

    def __init__(
        self,
        predicate: Callable[[T, User, Context], bool],
        applies_to: Applicability | None = None,
    ):
        self.predicate = predicate
        self.applies_to = applies_to

    def is_applicable(self, user: User, context: Context) -> bool:
        if self.applies_to is None:
            return True
        return bool(self.applies_to(user, context))

    def apply(self, record: T, user: User, context: Context) -> T | None:
        return record if self.predicate(record, user, context) else None


class TransformRule(Rule[T]):
    """
    Maps each record through a transform, e.g. to redact fields.

    A transform returning None drops the record.
    """

    def __init__(
        self,
        transform: Callable[[T, User, Context], T | None],
        applies_to: Applicability | None = None,
    ):
        self.transform = transform
        self.applies_to = applies_to

    def is_applicable(self, user: User, context: Context) -> bool:
        if self.applies_to is None:
            return True
        return bool(self.applies_to(user, context))

    def apply(self, record: T, user: User, context: Context) -> T | None:
        return self.transform(record, user, context)

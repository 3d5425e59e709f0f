# Record Rules
# Per-record predicates and transforms conditioned on user and context.
# Rule evaluation itself is owned by the policy layer; these are the
# contracts readers apply, plus simple predicate/transform rules.

from recordgate.rules.rule import (
    Rule,
    PredicateRule,
    TransformRule,
)
from recordgate.rules.rules import Rules

__all__ = [
    "Rule",
    "PredicateRule",
    "TransformRule",
    "Rules",
]

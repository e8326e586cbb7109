"""Constraint evaluation against the runtime facts."""

from __future__ import annotations

from collections.abc import Sequence

from py_app_dev.core.logging import logger

from nativefetch.domain import Constraints, RuntimeFacts


def evaluate_constraint(name: str, args: Sequence[str], facts: RuntimeFacts) -> bool:
    """
    Evaluate a single named constraint.

    Unknown constraint names never pass.
    """
    if name == "platform":
        return facts.platform in args
    if name == "arch":
        return facts.arch in args
    if name == "platform-arch":
        return f"{facts.platform}-{facts.arch}" in args
    logger.warning(f"Unknown constraint name: {name}, pass: false")
    return False


def check_constraints(constraints: Constraints | None, facts: RuntimeFacts) -> bool:
    """Return True when every constraint passes, stopping at the first failure."""
    if not constraints:
        return True
    for name, args in constraints.items():
        if not evaluate_constraint(name, args, facts):
            return False
    return True

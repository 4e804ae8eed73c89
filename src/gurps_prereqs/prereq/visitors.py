"""Traversals over the string criteria owned by a prereq tree.

Templates embed nameable keys (``@Weapon@``) in criteria qualifiers; these
helpers find them and substitute user-chosen values. The placeholder
syntax itself belongs to gurps_prereqs.models.nameables.
"""

from __future__ import annotations

from collections.abc import Callable

from gurps_prereqs.logging import get_logger
from gurps_prereqs.models.criteria import StringCriteria
from gurps_prereqs.models.nameables import apply_nameables, extract_nameables
from gurps_prereqs.prereq.nodes import (
    AdvantagePrereq,
    Prereq,
    PrereqList,
    SkillPrereq,
    SpellMatchMode,
    SpellPrereq,
)

logger = get_logger(__name__)


def _string_criteria_of(prereq: Prereq) -> list[StringCriteria]:
    """The string criteria a single node owns, in declaration order."""
    if isinstance(prereq, AdvantagePrereq):
        return [prereq.name_criteria, prereq.notes_criteria]
    if isinstance(prereq, SkillPrereq):
        return [prereq.name_criteria, prereq.specialization_criteria]
    # The qualifier survives a switch to ANY mode, so it is kept in step;
    # COLLEGE_COUNT never reads it.
    if isinstance(prereq, SpellPrereq) and prereq.mode is not SpellMatchMode.COLLEGE_COUNT:
        return [prereq.qualifier_criteria]
    return []


def for_each_string_criteria(
    prereq: Prereq, callback: Callable[[StringCriteria], None]
) -> None:
    """Call ``callback`` on every string criteria in the tree, depth-first."""
    if isinstance(prereq, PrereqList):
        for child in prereq.children:
            for_each_string_criteria(child, callback)
        return
    for criteria in _string_criteria_of(prereq):
        callback(criteria)


def collect_nameable_keys(prereq: Prereq, keys: set[str]) -> None:
    """Add every nameable key used by the tree's qualifiers to ``keys``."""
    for_each_string_criteria(prereq, lambda criteria: extract_nameables(keys, criteria.qualifier))


def substitute_nameable_keys(prereq: Prereq, mapping: dict[str, str]) -> None:
    """Replace nameable keys in every qualifier using ``mapping``, in place."""
    changed = 0

    def _apply(criteria: StringCriteria) -> None:
        nonlocal changed
        updated = apply_nameables(mapping, criteria.qualifier)
        if updated != criteria.qualifier:
            criteria.qualifier = updated
            changed += 1

    for_each_string_criteria(prereq, _apply)
    if changed:
        logger.debug("nameable_keys_substituted", qualifiers=changed, keys=sorted(mapping))

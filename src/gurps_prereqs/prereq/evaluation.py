"""Prerequisite evaluation against a character snapshot.

evaluate() walks a prereq tree depth-first and returns a PrereqResult:
the boolean outcome, the explanation lines for an unsatisfied node, and
the per-child results it was built from.

Leaves follow one shape:
  1. scan a character collection, read attributes, or inspect the
     excluded row, producing a raw ``found``;
  2. invert once for ``has=False``;
  3. on failure, render one explanation line.

Lists are gated by tech level first. A list whose gate does not match the
character is inapplicable and counts as satisfied. Otherwise children are
combined with AND (``requires_all``) or OR; an empty AND list passes and an
empty OR list fails.

Collection scans never match the excluded row, so a feature cannot satisfy
its own prerequisites.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from gurps_prereqs.engine.prereq_config import PrereqConfig
from gurps_prereqs.logging import get_logger
from gurps_prereqs.models.character import Character
from gurps_prereqs.models.constants import ATTRIBUTE_NAMES, NOTES_SEPARATOR
from gurps_prereqs.models.rows import Equipment, ListRow, Skill, Spell
from gurps_prereqs.prereq.nodes import (
    AdvantagePrereq,
    AttributePrereq,
    ContainedQuantityPrereq,
    ContainedWeightPrereq,
    HasPrereq,
    Prereq,
    PrereqList,
    SkillPrereq,
    SpellMatchMode,
    SpellPrereq,
)

logger = get_logger(__name__)


@dataclass(slots=True)
class PrereqResult:
    """Outcome of evaluating one node.

    ``lines`` is empty when satisfied. ``children`` holds each child's own
    result for a PrereqList, including the text of failing children that
    an OR list discarded because another child passed.
    """

    satisfied: bool
    lines: list[str] = field(default_factory=list)
    children: list[PrereqResult] = field(default_factory=list)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


# ---------------------------------------------------------------------------
# Leaf checks: raw match, before the has/does-not-have inversion
# ---------------------------------------------------------------------------


def _check_advantage(req: AdvantagePrereq, character: Character, exclude: ListRow | None) -> bool:
    for advantage in character.iter_advantages():
        if advantage is exclude or not req.name_criteria.matches(advantage.name):
            continue
        notes = advantage.notes
        if advantage.modifier_notes:
            notes = advantage.modifier_notes + NOTES_SEPARATOR + notes
        if not req.notes_criteria.matches(notes):
            continue
        # Unleveled advantages report -1 levels.
        if req.level_criteria.matches(max(advantage.levels, 0)):
            return True
    return False


def _check_skill(req: SkillPrereq, character: Character, exclude: ListRow | None) -> bool:
    tech_level = exclude.tech_level if isinstance(exclude, Skill) else None
    for skill in character.iter_skills():
        if skill is exclude:
            continue
        if not req.name_criteria.matches(skill.name):
            continue
        if not req.specialization_criteria.matches(skill.specialization):
            continue
        if not req.level_criteria.matches(skill.level):
            continue
        if tech_level is not None and skill.tech_level is not None and skill.tech_level != tech_level:
            continue
        return True
    return False


def count_spells(req: SpellPrereq, character: Character, exclude: ListRow | None = None) -> int:
    """Number of qualifying spells, or of distinct colleges for COLLEGE_COUNT.

    A spell qualifies when it has points, is not the excluded row, and (if
    the excluded row is a spell with a tech level) has no tech level or the
    same one.
    """
    tech_level = exclude.tech_level if isinstance(exclude, Spell) else None
    count = 0
    colleges: set[str] = set()
    for spell in character.iter_spells():
        if spell is exclude or spell.points <= 0:
            continue
        if tech_level is not None and spell.tech_level is not None and spell.tech_level != tech_level:
            continue
        if req.mode is SpellMatchMode.NAME:
            if req.qualifier_criteria.matches(spell.name):
                count += 1
        elif req.mode is SpellMatchMode.ANY:
            count += 1
        elif req.mode is SpellMatchMode.COLLEGE:
            if req.qualifier_criteria.matches(spell.college):
                count += 1
        else:
            colleges.add(spell.college)
    if req.mode is SpellMatchMode.COLLEGE_COUNT:
        return len(colleges)
    return count


def _check_spell(req: SpellPrereq, character: Character, exclude: ListRow | None) -> bool:
    return req.quantity_criteria.matches(count_spells(req, character, exclude))


def _check_attribute(req: AttributePrereq, character: Character) -> bool:
    value = character.attribute(req.which) + character.attribute(req.combined_with)
    return req.value_criteria.matches(value)


def _check_contained_weight(req: ContainedWeightPrereq, exclude: ListRow | None) -> bool:
    if not isinstance(exclude, Equipment) or not exclude.can_have_children:
        return False
    return req.weight_criteria.matches(exclude.extended_weight - exclude.adjusted_weight)


def _check_contained_quantity(req: ContainedQuantityPrereq, exclude: ListRow | None) -> bool:
    if not isinstance(exclude, Equipment) or not exclude.can_have_children:
        return False
    quantity = sum(
        child.quantity for child in exclude.children if isinstance(child, Equipment)
    )
    return req.quantity_criteria.matches(quantity)


def _found(req: HasPrereq, character: Character, exclude: ListRow | None) -> bool:
    """Dispatch the raw match by leaf type."""
    if isinstance(req, AdvantagePrereq):
        return _check_advantage(req, character, exclude)
    if isinstance(req, SkillPrereq):
        return _check_skill(req, character, exclude)
    if isinstance(req, SpellPrereq):
        return _check_spell(req, character, exclude)
    if isinstance(req, AttributePrereq):
        return _check_attribute(req, character)
    if isinstance(req, ContainedWeightPrereq):
        return _check_contained_weight(req, exclude)
    if isinstance(req, ContainedQuantityPrereq):
        return _check_contained_quantity(req, exclude)
    raise TypeError(f"Unknown prerequisite type: {type(req).__name__}")


# ---------------------------------------------------------------------------
# Human-readable unmet descriptions
# ---------------------------------------------------------------------------


def _describe_skill(req: SkillPrereq, exclude: ListRow | None) -> str:
    text = f"{req.has_text} a skill whose name {req.name_criteria}"
    if not req.specialization_criteria.is_anything:
        text += f", specialization {req.specialization_criteria},"
    if not isinstance(exclude, Skill) or exclude.tech_level is None:
        return text + f" and level {req.level_criteria}"
    if req.specialization_criteria.is_anything:
        return text + f", level {req.level_criteria} and tech level matches"
    return text + f" level {req.level_criteria} and tech level matches"


def _describe_spell(req: SpellPrereq) -> str:
    quantity = req.quantity_criteria
    noun = "spell" if quantity.qualifier == 1 else "spells"
    if req.mode is SpellMatchMode.NAME:
        return f"{req.has_text} {quantity} {noun} whose name {req.qualifier_criteria}"
    if req.mode is SpellMatchMode.ANY:
        return f"{req.has_text} {quantity} {noun} of any kind"
    if req.mode is SpellMatchMode.COLLEGE:
        return f"{req.has_text} {quantity} {noun} whose college {req.qualifier_criteria}"
    return f"{req.has_text} college count which {quantity}"


def describe(req: HasPrereq, exclude: ListRow | None = None) -> str:
    """Return the explanation text for a leaf, without prefix."""
    if isinstance(req, AdvantagePrereq):
        text = f"{req.has_text} an advantage whose name {req.name_criteria}"
        if not req.notes_criteria.is_anything:
            text += f", notes {req.notes_criteria},"
        return text + f" and level {req.level_criteria}"
    if isinstance(req, SkillPrereq):
        return _describe_skill(req, exclude)
    if isinstance(req, SpellPrereq):
        return _describe_spell(req)
    if isinstance(req, AttributePrereq):
        name = ATTRIBUTE_NAMES[req.which]
        if req.combined_with is not None:
            name += "+" + ATTRIBUTE_NAMES[req.combined_with]
        return f"{req.has_text} {name} which {req.value_criteria}"
    if isinstance(req, ContainedWeightPrereq):
        return f"{req.has_text} a contained weight which {req.weight_criteria}"
    if isinstance(req, ContainedQuantityPrereq):
        return f"{req.has_text} a contained quantity which {req.quantity_criteria}"
    raise TypeError(f"Unknown prerequisite type: {type(req).__name__}")


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------


def _evaluate_leaf(
    req: HasPrereq, character: Character, exclude: ListRow | None, config: PrereqConfig
) -> PrereqResult:
    found = _found(req, character, exclude)
    satisfied = found if req.has else not found
    if satisfied:
        return PrereqResult(True)
    line = config.line_prefix(req.depth) + describe(req, exclude)
    return PrereqResult(False, [line])


def _evaluate_list(
    req: PrereqList, character: Character, exclude: ListRow | None, config: PrereqConfig
) -> PrereqResult:
    if req.when_tl_enabled and not req.when_tl.matches(character.tech_level_value):
        logger.debug(
            "tech_level_gate_skipped",
            tech_level=character.tech_level,
            gate=str(req.when_tl),
        )
        return PrereqResult(True)

    children = [_evaluate(child, character, exclude, config) for child in req.children]
    satisfied_count = sum(1 for result in children if result.satisfied)
    if req.requires_all:
        satisfied = satisfied_count == len(children)
    else:
        satisfied = satisfied_count > 0
    if satisfied:
        return PrereqResult(True, children=children)

    header = "Requires all of:" if req.requires_all else "Requires at least one of:"
    lines = [config.line_prefix(req.depth) + header]
    for result in children:
        lines.extend(result.lines)
    return PrereqResult(False, lines, children)


def _evaluate(
    req: Prereq, character: Character, exclude: ListRow | None, config: PrereqConfig
) -> PrereqResult:
    if isinstance(req, PrereqList):
        return _evaluate_list(req, character, exclude, config)
    if isinstance(req, HasPrereq):
        return _evaluate_leaf(req, character, exclude, config)
    raise TypeError(f"Unknown prerequisite type: {type(req).__name__}")


def evaluate(
    req: Prereq,
    character: Character,
    exclude: ListRow | None = None,
    config: PrereqConfig | None = None,
) -> PrereqResult:
    """Evaluate ``req`` for ``character``, skipping ``exclude`` in scans.

    ``exclude`` is the row that owns the tree. Skill and spell prereqs
    also read its tech level; contained weight/quantity prereqs read its
    contents.
    """
    return _evaluate(req, character, exclude, config or PrereqConfig())

"""Character snapshot data model.

Holds the attribute scores, tech level, and row lists that prerequisite
evaluation reads. Nothing here is computed from points; callers supply
final values, the same way a sheet would after recalculation.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from gurps_prereqs.models.constants import Attribute
from gurps_prereqs.models.rows import Advantage, Equipment, Skill, Spell


# Default primary attributes: the human average of 10.
_DEFAULT_ATTRIBUTES: dict[int, int] = {
    Attribute.ST: 10,
    Attribute.DX: 10,
    Attribute.IQ: 10,
    Attribute.HT: 10,
}

_LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")


def extract_integer(text: str | None, default: int = 0) -> int:
    """Parse the integer at the start of ``text`` ("8", "3+", " -1").

    Returns ``default`` when the text does not start with a number.
    """
    if not text:
        return default
    match = _LEADING_INTEGER.match(text)
    if match is None:
        return default
    return int(match.group(1))


@dataclass
class Character:
    """A GURPS character as seen by the prerequisite engine.

    Will and Perception are IQ plus their adjustments. Row lists hold
    top-level rows; the iter_* helpers flatten containers.
    """

    name: str = ""
    tech_level: str = ""

    # ST, DX, IQ, HT keyed by Attribute
    attributes: dict[int, int] = field(default_factory=lambda: dict(_DEFAULT_ATTRIBUTES))
    will_adj: int = 0
    per_adj: int = 0

    advantages: list[Advantage] = field(default_factory=list)
    skills: list[Skill] = field(default_factory=list)
    spells: list[Spell] = field(default_factory=list)
    equipment: list[Equipment] = field(default_factory=list)

    def attribute(self, which: Attribute | None) -> int:
        """Current value of ``which``; None contributes 0."""
        if which is None:
            return 0
        if which == Attribute.WILL:
            return self.attribute(Attribute.IQ) + self.will_adj
        if which == Attribute.PERCEPTION:
            return self.attribute(Attribute.IQ) + self.per_adj
        return self.attributes.get(which, 0)

    @property
    def tech_level_value(self) -> int:
        """The tech level as an integer, 0 when it cannot be parsed."""
        return extract_integer(self.tech_level, 0)

    def iter_advantages(self) -> Iterator[Advantage]:
        """Every advantage, containers included, depth-first."""
        for row in self.advantages:
            yield from row.walk()

    def iter_skills(self) -> Iterator[Skill]:
        """Every non-container skill, depth-first."""
        for row in self.skills:
            for skill in row.walk():
                if not skill.can_have_children:
                    yield skill

    def iter_spells(self) -> Iterator[Spell]:
        """Every non-container spell, depth-first."""
        for row in self.spells:
            for spell in row.walk():
                if not spell.can_have_children:
                    yield spell

    def iter_equipment(self) -> Iterator[Equipment]:
        for row in self.equipment:
            yield from row.walk()

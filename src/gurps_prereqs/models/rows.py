"""List row models: advantages, skills, spells, and equipment.

Every row owns a PrereqList and caches the outcome of the most recent
evaluation (see PrereqEngine.process). Rows nest: a container row holds its
children in ``children`` and reports ``can_have_children``.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from gurps_prereqs.models.nameables import apply_nameables, extract_nameables
from gurps_prereqs.prereq.nodes import PrereqList
from gurps_prereqs.prereq.visitors import collect_nameable_keys, substitute_nameable_keys


@dataclass(slots=True, eq=False)
class ListRow:
    """Fields shared by every row kind."""
    name: str = ""
    notes: str = ""
    container: bool = False
    children: list[ListRow] = field(default_factory=list)
    prereqs: PrereqList = field(default_factory=PrereqList)
    satisfied: bool = True
    unsatisfied_reason: str | None = None

    @property
    def can_have_children(self) -> bool:
        return self.container

    def walk(self):
        """Yield this row and then every descendant, depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()

    def collect_nameable_keys(self, keys: set[str]) -> None:
        extract_nameables(keys, self.name)
        extract_nameables(keys, self.notes)
        collect_nameable_keys(self.prereqs, keys)

    def apply_nameable_keys(self, mapping: dict[str, str]) -> None:
        self.name = apply_nameables(mapping, self.name)
        self.notes = apply_nameables(mapping, self.notes)
        substitute_nameable_keys(self.prereqs, mapping)


@dataclass(slots=True, eq=False)
class Advantage(ListRow):
    """An advantage or disadvantage. ``levels`` < 0 means unleveled."""
    levels: int = -1
    modifier_notes: str = ""


@dataclass(slots=True, eq=False)
class Skill(ListRow):
    """A skill or technique at its computed level."""
    specialization: str = ""
    tech_level: str | None = None   # None when the skill has no TL
    level: int = 0

    def collect_nameable_keys(self, keys: set[str]) -> None:
        ListRow.collect_nameable_keys(self, keys)
        extract_nameables(keys, self.specialization)

    def apply_nameable_keys(self, mapping: dict[str, str]) -> None:
        ListRow.apply_nameable_keys(self, mapping)
        self.specialization = apply_nameables(mapping, self.specialization)


@dataclass(slots=True, eq=False)
class Spell(ListRow):
    """A spell. Only spells with points > 0 count toward spell prereqs."""
    college: str = ""
    tech_level: str | None = None
    points: int = 1

    def collect_nameable_keys(self, keys: set[str]) -> None:
        ListRow.collect_nameable_keys(self, keys)
        extract_nameables(keys, self.college)

    def apply_nameable_keys(self, mapping: dict[str, str]) -> None:
        ListRow.apply_nameable_keys(self, mapping)
        self.college = apply_nameables(mapping, self.college)


@dataclass(slots=True, eq=False)
class Equipment(ListRow):
    """A piece of equipment; weights are per unit, in pounds."""
    quantity: int = 1
    weight: float = 0.0

    @property
    def adjusted_weight(self) -> float:
        # Equipment modifiers are not modelled; the base weight stands.
        return self.weight

    @property
    def extended_weight(self) -> float:
        """Own weight times quantity, plus the extended weight of contents."""
        contained = sum(child.extended_weight for child in self.children)
        return self.adjusted_weight * self.quantity + contained

"""Prerequisite tree nodes.

A prerequisite tree is a PrereqList root whose children are leaves or
further PrereqLists:

  PrereqList(requires_all=True)          AND
    SkillPrereq(name IS "Climbing")
    PrereqList(requires_all=False)       OR
      AttributePrereq(ST at least 12)
      AdvantagePrereq(name IS "Lifting ST")

Lists own their children exclusively. A child keeps only a weak reference
back to its list, used for detaching and for depth-aware explanations.
All structural changes go through PrereqList.add/remove, which keep the
back-reference and the owning list in agreement.

Evaluation lives in gurps_prereqs.prereq.evaluation; nodes only hold data.
"""

from __future__ import annotations

import copy
import weakref
from collections.abc import Iterable
from dataclasses import InitVar, dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, ClassVar

from gurps_prereqs.logging import get_logger
from gurps_prereqs.models.constants import (
    TL_GATE_DISABLED,
    TL_GATE_ENABLED_DEFAULT,
    Attribute,
)
from gurps_prereqs.models.criteria import (
    IntegerCriteria,
    NumericCompareType,
    StringCompareType,
    StringCriteria,
    WeightCriteria,
)

if TYPE_CHECKING:
    from gurps_prereqs.engine.prereq_config import PrereqConfig
    from gurps_prereqs.models.character import Character
    from gurps_prereqs.models.rows import ListRow

logger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Tech-level gate helpers
# ---------------------------------------------------------------------------


def is_when_tl_enabled(criteria: IntegerCriteria) -> bool:
    """True unless the criteria holds the AT_LEAST/minimum-int sentinel."""
    return (
        criteria.type is not NumericCompareType.AT_LEAST
        or criteria.qualifier != TL_GATE_DISABLED
    )


def set_when_tl_enabled(criteria: IntegerCriteria, enabled: bool) -> None:
    if is_when_tl_enabled(criteria) != enabled:
        criteria.qualifier = TL_GATE_ENABLED_DEFAULT if enabled else TL_GATE_DISABLED


def _disabled_tl_gate() -> IntegerCriteria:
    return IntegerCriteria(NumericCompareType.AT_LEAST, TL_GATE_DISABLED)


# ---------------------------------------------------------------------------
# Base contract
# ---------------------------------------------------------------------------


@dataclass(slots=True, weakref_slot=True)
class Prereq:
    """Abstract tree node. Concrete nodes set ``tag``."""

    tag: ClassVar[str] = ""

    _parent_ref: weakref.ref[PrereqList] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    @property
    def parent(self) -> PrereqList | None:
        """The owning list, or None for a root or detached node."""
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def depth(self) -> int:
        """Number of lists above this node."""
        depth = 0
        node = self.parent
        while node is not None:
            depth += 1
            node = node.parent
        return depth

    def clone(self, parent: PrereqList | None = None) -> Prereq:
        """Deep-copy this node. A given ``parent`` receives the copy as its last child."""
        twin = copy.deepcopy(self)
        twin._parent_ref = None
        if parent is not None:
            parent.add(twin)
        return twin

    def satisfied(
        self,
        character: Character,
        exclude: ListRow | None = None,
        config: PrereqConfig | None = None,
    ) -> bool:
        from gurps_prereqs.prereq.evaluation import evaluate

        return evaluate(self, character, exclude, config).satisfied

    def explain(
        self,
        character: Character,
        exclude: ListRow | None = None,
        config: PrereqConfig | None = None,
    ) -> list[str]:
        """Explanation lines for an unsatisfied node; empty when satisfied."""
        from gurps_prereqs.prereq.evaluation import evaluate

        return evaluate(self, character, exclude, config).lines


@dataclass(slots=True)
class HasPrereq(Prereq):
    """A leaf whose raw match is inverted when ``has`` is False."""

    has: bool = True

    @property
    def has_text(self) -> str:
        return "Has" if self.has else "Does not have"


@dataclass(slots=True)
class NameLevelPrereq(HasPrereq):
    """A leaf that matches rows by name and tests their level."""

    name_criteria: StringCriteria = field(default_factory=StringCriteria)
    level_criteria: IntegerCriteria = field(default_factory=IntegerCriteria)


# ---------------------------------------------------------------------------
# Leaves
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class AdvantagePrereq(NameLevelPrereq):
    tag: ClassVar[str] = "advantage_prereq"

    notes_criteria: StringCriteria = field(
        default_factory=lambda: StringCriteria(StringCompareType.ANY)
    )


@dataclass(slots=True)
class SkillPrereq(NameLevelPrereq):
    tag: ClassVar[str] = "skill_prereq"

    specialization_criteria: StringCriteria = field(
        default_factory=lambda: StringCriteria(StringCompareType.ANY)
    )


class SpellMatchMode(Enum):
    """What a SpellPrereq counts."""

    NAME = "name"                    # spells whose name matches
    ANY = "any"                      # every spell
    COLLEGE = "college"              # spells whose college matches
    COLLEGE_COUNT = "college_count"  # distinct colleges


@dataclass(slots=True)
class SpellPrereq(HasPrereq):
    """Counts qualifying spells and tests the count.

    ``qualifier_criteria`` applies to the spell name or college depending on
    ``mode`` and is ignored for ANY and COLLEGE_COUNT.
    """

    tag: ClassVar[str] = "spell_prereq"

    mode: SpellMatchMode = SpellMatchMode.NAME
    qualifier_criteria: StringCriteria = field(default_factory=StringCriteria)
    quantity_criteria: IntegerCriteria = field(
        default_factory=lambda: IntegerCriteria(NumericCompareType.AT_LEAST, 1)
    )


@dataclass(slots=True)
class AttributePrereq(HasPrereq):
    """Tests one attribute, or the sum of two."""

    tag: ClassVar[str] = "attribute_prereq"

    which: Attribute = Attribute.ST
    combined_with: Attribute | None = None
    value_criteria: IntegerCriteria = field(
        default_factory=lambda: IntegerCriteria(NumericCompareType.AT_LEAST, 10)
    )


@dataclass(slots=True)
class ContainedWeightPrereq(HasPrereq):
    """Tests the weight held inside the equipment container being evaluated."""

    tag: ClassVar[str] = "contained_weight_prereq"

    weight_criteria: WeightCriteria = field(default_factory=WeightCriteria)


@dataclass(slots=True)
class ContainedQuantityPrereq(HasPrereq):
    """Tests the number of items held directly by the container being evaluated."""

    tag: ClassVar[str] = "contained_quantity_prereq"

    quantity_criteria: IntegerCriteria = field(
        default_factory=lambda: IntegerCriteria(NumericCompareType.AT_MOST, 1)
    )


# ---------------------------------------------------------------------------
# Composite
# ---------------------------------------------------------------------------


@dataclass(slots=True)
class PrereqList(Prereq):
    """An AND (``requires_all``) or OR list of prerequisites.

    ``when_tl`` gates the whole list on the character's tech level; the
    gate is off while it holds the AT_LEAST/TL_GATE_DISABLED sentinel.
    Children passed via ``prereqs`` are added in order.
    """

    tag: ClassVar[str] = "prereq_list"

    requires_all: bool = True
    when_tl: IntegerCriteria = field(default_factory=_disabled_tl_gate)
    _children: list[Prereq] = field(default_factory=list, init=False)
    prereqs: InitVar[Iterable[Prereq] | None] = None

    def __post_init__(self, prereqs: Iterable[Prereq] | None) -> None:
        for prereq in prereqs or ():
            self.add(prereq)

    @property
    def children(self) -> tuple[Prereq, ...]:
        return tuple(self._children)

    @property
    def is_empty(self) -> bool:
        return not self._children

    @property
    def when_tl_enabled(self) -> bool:
        return is_when_tl_enabled(self.when_tl)

    @when_tl_enabled.setter
    def when_tl_enabled(self, enabled: bool) -> None:
        set_when_tl_enabled(self.when_tl, enabled)

    def index_of(self, prereq: Prereq) -> int:
        """Position of a direct child, or -1."""
        for i, child in enumerate(self._children):
            if child is prereq:
                return i
        return -1

    def add(self, prereq: Prereq, index: int | None = None) -> None:
        """Insert ``prereq`` at ``index`` (append when None) and adopt it."""
        if prereq.parent is not None:
            raise ValueError(
                f"{prereq.tag} already belongs to a list; remove it first"
            )
        node: PrereqList | None = self
        while node is not None:
            if node is prereq:
                raise ValueError("Adding a list to itself or its descendant is not allowed")
            node = node.parent
        if index is None:
            self._children.append(prereq)
        else:
            self._children.insert(index, prereq)
        prereq._parent_ref = weakref.ref(self)
        logger.debug("prereq_added", tag=prereq.tag, index=index, depth=self.depth)

    def remove(self, prereq: Prereq) -> None:
        """Detach a direct child. Non-children are ignored."""
        i = self.index_of(prereq)
        if i < 0:
            return
        del self._children[i]
        prereq._parent_ref = None
        logger.debug("prereq_removed", tag=prereq.tag, index=i)

    def clone(self, parent: PrereqList | None = None) -> PrereqList:
        twin = PrereqList(
            requires_all=self.requires_all,
            when_tl=copy.copy(self.when_tl),
        )
        for child in self._children:
            child.clone(twin)
        if parent is not None:
            parent.add(twin)
        return twin


# Closed union of every concrete node; evaluation dispatches over it.
AnyPrereq = (
    PrereqList
    | AdvantagePrereq
    | SkillPrereq
    | SpellPrereq
    | AttributePrereq
    | ContainedWeightPrereq
    | ContainedQuantityPrereq
)

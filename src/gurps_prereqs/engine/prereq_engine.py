"""Prerequisite engine: evaluates every row of a character.

Each advantage, skill, spell, and equipment row carries its own PrereqList.
process() evaluates them all against the character, with the owning row as
the excluded row, and caches the outcome on the row (``satisfied`` and
``unsatisfied_reason``) so a sheet can flag unmet rows without
re-evaluating.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from gurps_prereqs.engine.prereq_config import PrereqConfig
from gurps_prereqs.logging import get_logger
from gurps_prereqs.models.character import Character
from gurps_prereqs.models.rows import Advantage, Equipment, ListRow, Skill, Spell
from gurps_prereqs.prereq.evaluation import PrereqResult, evaluate

logger = get_logger(__name__)


@dataclass(slots=True)
class PrereqFailure:
    """A single row whose prerequisites are not met."""

    kind: str          # "advantage" | "skill" | "spell" | "equipment"
    name: str
    reason: str


def _row_kind(row: ListRow) -> str:
    if isinstance(row, Advantage):
        return "advantage"
    if isinstance(row, Skill):
        return "skill"
    if isinstance(row, Spell):
        return "spell"
    if isinstance(row, Equipment):
        return "equipment"
    return "row"


class PrereqEngine:
    """Evaluates and records row prerequisites for whole characters.

    Holds no character state; one engine can serve any number of
    characters.
    """

    __slots__ = ("_config",)

    def __init__(self, config: PrereqConfig | None = None) -> None:
        self._config = config or PrereqConfig()

    @property
    def config(self) -> PrereqConfig:
        return self._config

    @staticmethod
    def rows(character: Character) -> Iterator[ListRow]:
        """Every row with prerequisites, in sheet order."""
        yield from character.iter_advantages()
        yield from character.iter_skills()
        yield from character.iter_spells()
        yield from character.iter_equipment()

    def check_row(self, character: Character, row: ListRow) -> PrereqResult:
        """Evaluate one row's prerequisites without touching the row."""
        return evaluate(row.prereqs, character, row, self._config)

    def process(self, character: Character) -> bool:
        """Re-evaluate every row and store the outcome on it.

        Returns True if any row's satisfied state or reason changed.
        """
        changed = False
        unsatisfied = 0
        for row in self.rows(character):
            result = self.check_row(character, row)
            reason = None if result.satisfied else result.text
            if row.satisfied != result.satisfied or row.unsatisfied_reason != reason:
                changed = True
            row.satisfied = result.satisfied
            row.unsatisfied_reason = reason
            if not result.satisfied:
                unsatisfied += 1
                logger.debug(
                    "row_prereqs_unsatisfied", kind=_row_kind(row), row=row.name
                )
        logger.info(
            "prereqs_processed",
            character=character.name,
            unsatisfied=unsatisfied,
            changed=changed,
        )
        return changed

    def unsatisfied(self, character: Character) -> list[PrereqFailure]:
        """Return every row whose prerequisites fail, with the reason."""
        failures: list[PrereqFailure] = []
        for row in self.rows(character):
            result = self.check_row(character, row)
            if not result.satisfied:
                failures.append(PrereqFailure(_row_kind(row), row.name, result.text))
        return failures

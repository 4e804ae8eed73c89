"""Configuration knobs for prerequisite explanations.

Defaults render plain-text bullet lists. A UI that shows explanations as
HTML can swap the bullet for "<li>" and drop the indent.
"""

from dataclasses import dataclass


@dataclass(slots=True)
class PrereqConfig:
    """How unsatisfied prerequisites are rendered."""

    bullet: str = "- "        # Leads every explanation line
    indent: str = "  "        # Repeated once per nesting depth

    def __post_init__(self) -> None:
        if "\n" in self.bullet or "\n" in self.indent:
            raise ValueError("bullet and indent must be single-line strings")

    def line_prefix(self, depth: int) -> str:
        """Prefix for a line rendered at ``depth`` (0 for the root)."""
        if depth < 0:
            raise ValueError(f"depth must be >= 0, got {depth}")
        return self.indent * depth + self.bullet

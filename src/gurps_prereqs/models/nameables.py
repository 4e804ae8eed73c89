"""Nameable placeholders in free text.

A nameable key is any text wrapped in a pair of ``@`` signs, e.g.
``"Weapon Master (@Weapon@)"``. Templates leave them in place until the
item is instantiated, at which point the user supplies a value per key.
"""

import re

_NAMEABLE = re.compile(r"@([^@]*)@")


def extract_nameables(keys: set[str], text: str) -> None:
    """Add every nameable key found in ``text`` to ``keys``."""
    for match in _NAMEABLE.finditer(text):
        keys.add(match.group(1))


def apply_nameables(mapping: dict[str, str], text: str) -> str:
    """Return ``text`` with known keys replaced; unknown keys are left as-is."""

    def _replace(match: re.Match[str]) -> str:
        return mapping.get(match.group(1), match.group(0))

    return _NAMEABLE.sub(_replace, text)

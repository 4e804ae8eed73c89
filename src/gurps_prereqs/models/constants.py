"""Attribute selectors and shared sentinels for prerequisite evaluation.

Only the attributes a prerequisite can test are listed here; derived values
like Basic Speed or Move are out of reach of the prereq tree.
"""

from enum import IntEnum


class Attribute(IntEnum):
    """Attributes addressable by an AttributePrereq.

    ST, DX, IQ and HT are primary; Will and Perception are derived from IQ
    plus an adjustment.
    """
    ST = 0
    DX = 1
    IQ = 2
    HT = 3
    WILL = 4
    PERCEPTION = 5


# Short names used in explanations (e.g. "ST+DX which at least 20")
ATTRIBUTE_NAMES: dict[int, str] = {
    Attribute.ST: "ST",
    Attribute.DX: "DX",
    Attribute.IQ: "IQ",
    Attribute.HT: "HT",
    Attribute.WILL: "Will",
    Attribute.PERCEPTION: "Per",
}

# AT_LEAST with this qualifier marks a PrereqList tech-level gate as disabled.
TL_GATE_DISABLED = -(2**31)

# Qualifier given to the gate when it is switched on.
TL_GATE_ENABLED_DEFAULT = 0

# Appended to advantage modifier notes when building the string notes
# criteria are matched against.
NOTES_SEPARATOR = "\n"

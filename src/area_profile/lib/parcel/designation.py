"""Swedish property designation (fastighetsbeteckning) parsing.

Accepted forms, case-insensitive::

    MUNICIPALITY TRACT BLOCK[:UNIT]   e.g. "UMEÅ TOLVMANSGÅRDEN 4"
    MUNICIPALITY BLOCK[:UNIT]         e.g. "STOCKHOLM 1:1"
"""

import re
from dataclasses import dataclass

_WITH_TRACT = re.compile(r"^([A-ZÅÄÖ\-]+)\s+([A-ZÅÄÖ\-]+)\s+(\d+)(?::(\d+))?$", re.IGNORECASE)
_WITHOUT_TRACT = re.compile(r"^([A-ZÅÄÖ\-]+)\s+(\d+)(?::(\d+))?$", re.IGNORECASE)


@dataclass(frozen=True)
class ParcelDesignation:
    """Parsed property designation."""

    municipality: str
    block: str
    tract: str | None = None
    unit: str | None = None

    def __str__(self) -> str:
        parts = [self.municipality]
        if self.tract:
            parts.append(self.tract)
        number = f"{self.block}:{self.unit}" if self.unit else self.block
        parts.append(number)
        return " ".join(parts)


def parse_designation(text: str) -> ParcelDesignation | None:
    """Parse a property designation.

    Whitespace is normalized and letters are upper-cased.

    Args:
        text: Designation as typed by a user.

    Returns:
        ParcelDesignation, or None if the text does not match either form.
    """
    normalized = " ".join(text.split()).upper()
    if not normalized:
        return None

    match = _WITH_TRACT.match(normalized)
    if match:
        municipality, tract, block, unit = match.groups()
        return ParcelDesignation(municipality=municipality, tract=tract, block=block, unit=unit)

    match = _WITHOUT_TRACT.match(normalized)
    if match:
        municipality, block, unit = match.groups()
        return ParcelDesignation(municipality=municipality, block=block, unit=unit)

    return None

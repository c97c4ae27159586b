"""Detection of ``"lat,lon"`` literals typed straight into the search box."""
from __future__ import annotations

import re
from typing import Optional

from .entities import Coordinates

# A decimal point is mandatory on both sides; "41,28" falls through to geocoding.
COORDINATE_PATTERN = re.compile(r"^\s*(-?\d+\.\d+)\s*,\s*(-?\d+\.\d+)\s*$")


def parse_coordinates(raw: Optional[str]) -> Optional[Coordinates]:
    """Return coordinates for a literal such as ``"41.0082,28.9784"``.

    ``None`` means "not a literal", not "not found": the caller is expected to
    try geocoding next. Range checks are left to the air-quality provider.
    """
    if not raw:
        return None
    match = COORDINATE_PATTERN.match(raw)
    if not match:
        return None
    return Coordinates(latitude=float(match.group(1)), longitude=float(match.group(2)))


__all__ = ["COORDINATE_PATTERN", "parse_coordinates"]

"""Cities the dashboard can be pointed at."""

from dataclasses import dataclass
from typing import Dict, List


@dataclass(frozen=True)
class City:
    name: str
    lat: float
    lon: float
    timezone: str  # IANA zone, used to decide which days are "past"


CITIES: List[City] = [
    City("New York", 40.7128, -74.006, "America/New_York"),
    City("Chicago", 41.8781, -87.6298, "America/Chicago"),
    City("Los Angeles", 34.0522, -118.2437, "America/Los_Angeles"),
    City("Miami", 25.7617, -80.1918, "America/New_York"),
    City("Dallas", 32.7767, -96.797, "America/Chicago"),
    City("Denver", 39.7392, -104.9903, "America/Denver"),
    City("Austin", 30.2672, -97.7431, "America/Chicago"),
]

DEFAULT_CITY = CITIES[0]

_BY_NAME: Dict[str, City] = {c.name.lower(): c for c in CITIES}


def get_city(name: str) -> City:
    """Case-insensitive lookup by name."""
    try:
        return _BY_NAME[name.strip().lower()]
    except KeyError:
        known = ", ".join(c.name for c in CITIES)
        raise KeyError(f"Unknown city {name!r}. Known cities: {known}") from None

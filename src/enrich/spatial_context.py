"""Region classification and governorate inference.

Free-text location names are mapped onto the closed region set by
substring tests against curated town and governorate lists. Governorates
are inferred from names first and from coordinate bounding boxes second.
"""

from __future__ import annotations

from dataclasses import dataclass
import math
import re

from core.constants import (
    EARTH_RADIUS_METERS,
    REGION_EAST_JERUSALEM,
    REGION_GAZA,
    REGION_PALESTINE,
    REGION_UNKNOWN,
    REGION_WEST_BANK,
)
from core.types import SourceMetadata

GAZA_KEYWORDS = (
    "gaza",
    "rafah",
    "khan yunis",
    "khan younis",
    "deir al-balah",
    "deir al balah",
    "jabalia",
    "beit lahia",
    "beit hanoun",
    "nuseirat",
)
WEST_BANK_KEYWORDS = (
    "west bank",
    "westbank",
    "ramallah",
    "hebron",
    "al-khalil",
    "nablus",
    "jenin",
    "tulkarm",
    "tulkarem",
    "qalqilya",
    "qalqiliya",
    "tubas",
    "salfit",
    "bethlehem",
    "jericho",
)
JERUSALEM_KEYWORDS = ("jerusalem", "al-quds")
_URBAN_AREAS = ("gaza", "khan yunis", "rafah", "jenin", "nablus", "hebron", "bethlehem", "ramallah")
PALESTINE_EXACT_NAMES = ("pse", "ps")

_SEPARATOR_PATTERN = re.compile(r"\s*\|\s*")
_WHITESPACE_PATTERN = re.compile(r"\s+")


@dataclass(frozen=True)
class GovernorateBounds:
    """Approximate bounding box for one governorate."""

    name: str
    region: str
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float

    def contains(self, longitude: float, latitude: float) -> bool:
        """Return whether a point lies inside the box."""
        return (
            self.min_lat <= latitude <= self.max_lat
            and self.min_lon <= longitude <= self.max_lon
        )


GOVERNORATE_BOUNDS = (
    GovernorateBounds("North Gaza", REGION_GAZA, 31.52, 31.60, 34.45, 34.56),
    GovernorateBounds("Gaza", REGION_GAZA, 31.45, 31.52, 34.38, 34.50),
    GovernorateBounds("Deir al-Balah", REGION_GAZA, 31.38, 31.45, 34.28, 34.42),
    GovernorateBounds("Khan Yunis", REGION_GAZA, 31.30, 31.38, 34.22, 34.38),
    GovernorateBounds("Rafah", REGION_GAZA, 31.22, 31.30, 34.20, 34.32),
    GovernorateBounds("Jenin", REGION_WEST_BANK, 32.40, 32.55, 35.15, 35.45),
    GovernorateBounds("Tubas", REGION_WEST_BANK, 32.25, 32.40, 35.35, 35.57),
    GovernorateBounds("Tulkarm", REGION_WEST_BANK, 32.25, 32.40, 34.98, 35.15),
    GovernorateBounds("Nablus", REGION_WEST_BANK, 32.10, 32.30, 35.15, 35.35),
    GovernorateBounds("Qalqilya", REGION_WEST_BANK, 32.10, 32.25, 34.93, 35.08),
    GovernorateBounds("Salfit", REGION_WEST_BANK, 32.02, 32.12, 35.08, 35.20),
    GovernorateBounds("Ramallah", REGION_WEST_BANK, 31.85, 32.02, 35.05, 35.35),
    GovernorateBounds("Jericho", REGION_WEST_BANK, 31.75, 32.00, 35.35, 35.57),
    GovernorateBounds("Jerusalem", REGION_EAST_JERUSALEM, 31.74, 31.85, 35.15, 35.30),
    GovernorateBounds("Bethlehem", REGION_WEST_BANK, 31.55, 31.74, 35.10, 35.40),
    GovernorateBounds("Hebron", REGION_WEST_BANK, 31.30, 31.55, 34.90, 35.25),
)

GAZA_GOVERNORATES = ("Gaza", "North Gaza", "Deir al-Balah", "Khan Yunis", "Rafah")
WEST_BANK_GOVERNORATES = (
    "Jenin",
    "Tubas",
    "Tulkarm",
    "Nablus",
    "Qalqilya",
    "Salfit",
    "Ramallah",
    "Jericho",
    "Jerusalem",
    "Bethlehem",
    "Hebron",
)

_GOVERNORATE_NAME_RULES = (
    (("north gaza", "northern gaza", "jabalia", "beit lahia", "beit hanoun"), "North Gaza"),
    (("deir al-balah", "deir al balah", "nuseirat"), "Deir al-Balah"),
    (("khan yunis", "khan younis"), "Khan Yunis"),
    (("rafah",), "Rafah"),
    (("gaza",), "Gaza"),
    (("jenin",), "Jenin"),
    (("tubas",), "Tubas"),
    (("tulkarm", "tulkarem"), "Tulkarm"),
    (("nablus",), "Nablus"),
    (("qalqilya", "qalqiliya"), "Qalqilya"),
    (("salfit",), "Salfit"),
    (("ramallah", "al-bireh"), "Ramallah"),
    (("jericho",), "Jericho"),
    (("jerusalem", "al-quds"), "Jerusalem"),
    (("bethlehem",), "Bethlehem"),
    (("hebron", "al-khalil"), "Hebron"),
)

CITY_COORDINATES = {
    "Gaza City": (34.45, 31.50),
    "Khan Yunis": (34.30, 31.35),
    "Rafah": (34.25, 31.30),
    "Ramallah": (35.20, 31.90),
    "Nablus": (35.25, 32.20),
    "Hebron": (35.10, 31.50),
    "Bethlehem": (35.20, 31.70),
    "Jenin": (35.30, 32.45),
}


def normalize_location_name(location_name: object) -> str:
    """Normalize a location for keyword matching.

    Args:
        location_name: Raw location text.

    Returns:
        Lowercased name with separator artifacts and extra spaces removed.
    """
    if not isinstance(location_name, str):
        return ""
    without_separators = _SEPARATOR_PATTERN.sub(" ", location_name.strip().lower())
    return _WHITESPACE_PATTERN.sub(" ", without_separators).strip()


def classify_region(location_name: object) -> str:
    """Classify a free-text location into the closed region set.

    Args:
        location_name: Raw location text.

    Returns:
        One of Gaza Strip, West Bank, East Jerusalem, Palestine, or Unknown.
    """
    name = normalize_location_name(location_name)
    if not name:
        return REGION_UNKNOWN
    if any(keyword in name for keyword in GAZA_KEYWORDS):
        return REGION_GAZA
    if any(keyword in name for keyword in WEST_BANK_KEYWORDS):
        return REGION_WEST_BANK
    if any(keyword in name for keyword in JERUSALEM_KEYWORDS):
        return REGION_EAST_JERUSALEM
    if "palestin" in name or name in PALESTINE_EXACT_NAMES:
        return REGION_PALESTINE
    return REGION_UNKNOWN


def classify_region_with_fallback(location_name: object, source_meta: SourceMetadata) -> str:
    """Classify a location, falling back to dataset title and description.

    Args:
        location_name: Raw location text.
        source_meta: Metadata of the dataset the record came from.

    Returns:
        Region name from the closed set.
    """
    region = classify_region(location_name)
    if region != REGION_UNKNOWN:
        return region
    metadata_text = f"{source_meta.title} {source_meta.description}"
    return classify_region(metadata_text)


def infer_governorate(location_name: object) -> str | None:
    """Infer a governorate name from free-text location.

    Args:
        location_name: Raw location text.

    Returns:
        Governorate name or None.
    """
    name = normalize_location_name(location_name)
    if not name:
        return None
    for keywords, governorate in _GOVERNORATE_NAME_RULES:
        if any(keyword in name for keyword in keywords):
            return governorate
    return None


def find_governorate_by_coordinates(coordinates: tuple[float, float] | None) -> str | None:
    """Find the governorate whose bounding box contains a point.

    Args:
        coordinates: ``(longitude, latitude)`` pair.

    Returns:
        Governorate name or None.
    """
    if coordinates is None:
        return None
    longitude, latitude = coordinates
    for bounds in GOVERNORATE_BOUNDS:
        if bounds.contains(longitude, latitude):
            return bounds.name
    return None


def region_for_governorate(governorate: str | None) -> str:
    """Return the region a known governorate belongs to."""
    for bounds in GOVERNORATE_BOUNDS:
        if bounds.name == governorate:
            return bounds.region
    return REGION_UNKNOWN


def classify_region_type(location_name: object) -> str | None:
    """Classify a location as camp, urban, or rural when the name says so."""
    name = normalize_location_name(location_name)
    if not name:
        return None
    if "camp" in name or "refugee" in name:
        return "camp"
    if "city" in name:
        return "urban"
    if "village" in name or "rural" in name:
        return "rural"
    if any(city in name for city in _URBAN_AREAS):
        return "urban"
    return None


def find_nearest_city(coordinates: tuple[float, float]) -> str:
    """Return the nearest major city to a point."""
    longitude, latitude = coordinates
    return min(
        CITY_COORDINATES,
        key=lambda city: haversine_distance(
            latitude, longitude, CITY_COORDINATES[city][1], CITY_COORDINATES[city][0]
        ),
    )


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters between two points.

    Args:
        lat1: Latitude of the first point.
        lon1: Longitude of the first point.
        lat2: Latitude of the second point.
        lon2: Longitude of the second point.

    Returns:
        Distance in meters.
    """
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    delta_phi = math.radians(lat2 - lat1)
    delta_lambda = math.radians(lon2 - lon1)
    a = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def coordinates_in_range(coordinates: tuple[float, float] | None) -> bool:
    """Return whether a coordinate pair is valid longitude/latitude."""
    if coordinates is None:
        return True
    longitude, latitude = coordinates
    return -180.0 <= longitude <= 180.0 and -90.0 <= latitude <= 90.0

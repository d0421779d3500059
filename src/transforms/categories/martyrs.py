"""Individual casualty registry category."""

from __future__ import annotations

from typing import Mapping

from core.types import SourceMetadata
from transforms.category_spec import CategorySpec, RecordPayload, text_field
from transforms.field_mapping import with_location_fields
from transforms.value_parsing import normalize_date, parse_optional_int

SEX_LABELS = {"m": "male", "male": "male", "f": "female", "female": "female"}

MARTYRS_FIELD_MAPPING = with_location_fields(
    {
        "date": ("date_of_death", "date", "dob"),
        "name": ("name", "en_name", "ar_name"),
        "name_ar": ("ar_name", "name"),
        "name_en": ("en_name",),
        "age": ("age",),
        "sex": ("sex", "gender"),
        "dob": ("dob",),
    }
)


def normalize_sex(sex: str | None) -> str:
    """Return male, female, or unknown."""
    if not sex:
        return "unknown"
    return SEX_LABELS.get(sex.strip().lower(), "unknown")


def build_martyr_payload(
    mapped: Mapping[str, object],
    source_meta: SourceMetadata,
) -> RecordPayload | None:
    """Build one registry entry counted as a single person; unnamed rows are dropped."""
    name = text_field(mapped, "name")
    if name is None:
        return None
    return RecordPayload(
        value=1.0,
        unit="persons",
        record_type="martyr",
        attributes={
            "name": name,
            "name_ar": text_field(mapped, "name_ar"),
            "name_en": text_field(mapped, "name_en"),
            "age": parse_optional_int(mapped.get("age")),
            "sex": normalize_sex(text_field(mapped, "sex")),
            "dob": normalize_date(mapped.get("dob")),
            "date_of_death": normalize_date(mapped.get("date")),
        },
    )


MARTYRS_SPEC = CategorySpec(
    category="martyrs",
    record_type="martyr",
    id_prefix="martyr",
    required_fields=("name",),
    field_mapping=MARTYRS_FIELD_MAPPING,
    build_payload=build_martyr_payload,
    default_location="Gaza",
    index_in_id=True,
)

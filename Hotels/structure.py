'''
Structure class implementation for Hotels module.
'''
from datetime import datetime
from typing import Any, Mapping, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field, field_validator

from utils import normalize_number, parse_number

OPTIONAL_TEXT_FIELDS = ("description", "amenities", "contact_phone")


class ListingFields(BaseModel):
    """Mutable listing fields, as accepted from HTML forms and JSON bodies."""

    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    title : str = Field(min_length=1)
    description : str = ""
    location : str = Field(min_length=1)
    price_per_night : float = Field(gt=0)
    stars : int = Field(ge=1, le=5)
    rooms : int = Field(ge=1)
    amenities : str = ""
    contact_phone : str = ""

    @field_validator(*OPTIONAL_TEXT_FIELDS, mode="before")
    @classmethod
    def blank_optional_text(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("price_per_night", mode="before")
    @classmethod
    def coerce_price(cls, value: Any) -> float:
        number = parse_number(value)
        if number is None:
            raise ValueError("price_per_night must be a finite number")
        return number

    @field_validator("stars", "rooms", mode="before")
    @classmethod
    def coerce_whole_number(cls, value: Any) -> int:
        number = parse_number(value)
        if number is None or not number.is_integer():
            raise ValueError("must be a whole number")
        return int(number)

    @field_validator("price_per_night")
    @classmethod
    def compact_price(cls, value: float) -> float:
        return normalize_number(value)

    def to_document(self) -> dict[str, Any]:
        """
        Serialize the mutable fields for the hotels collection.

        Returns:
            dict[str, Any]: field mapping without identifier or timestamp.
        """
        return self.model_dump(include=set(ListingFields.model_fields))


class Listing(ListingFields):
    """A stored hotel listing."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id : str = Field(alias="_id", frozen=True)
    created_at : Optional[datetime] = Field(default=None, frozen=True)

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value: Any) -> str:
        return str(value)

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "Listing":
        return cls.model_validate(dict(document))


def serialize_document(document: Mapping[str, Any]) -> dict[str, Any]:
    """Make a raw (possibly projected) hotels document JSON friendly."""

    serialized: dict[str, Any] = {}
    for key, value in document.items():
        if isinstance(value, ObjectId):
            value = str(value)
        elif isinstance(value, datetime):
            value = value.isoformat()
        serialized[key] = value
    return serialized

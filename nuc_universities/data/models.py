"""Pydantic models for scraped university data."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict, Field


class UniversityType(str, Enum):
    """Category label assigned to every record of a source listing."""
    FEDERAL = "Federal"
    STATE = "State"
    PRIVATE = "Private"


class University(BaseModel):
    """A normalized university record."""

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    name: str = Field(min_length=1)
    state: str = ""
    city: str = ""
    abbreviation: str = Field(default="", max_length=6, pattern=r"^[A-Z]*$")
    vice_chancellor: str = ""
    year_of_establishment: str = ""
    website: str = ""
    university_type: UniversityType


class Source(BaseModel):
    """A listing page to scrape and the category its rows belong to."""

    model_config = ConfigDict(frozen=True)

    url: str
    university_type: UniversityType


class RawRow(NamedTuple):
    """Text fields pulled from one listing table row."""

    name: str
    vice_chancellor: str
    website: str
    year_of_establishment: str

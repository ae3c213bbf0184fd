from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GeneralInfoBlock(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    description: str


class GeneralInformation(BaseModel):
    model_config = ConfigDict(frozen=True)

    gallery_collection: GeneralInfoBlock | None = None
    gothic_style: GeneralInfoBlock | None = None


class SculptureRecord(BaseModel):
    """One sculpture entry.

    Every descriptive field is free text; ``year`` in particular holds
    imprecise historical ranges such as ``"around 1380"``.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    year: str | None = None
    location: str | None = None
    artist: str | None = None
    cast_information: str | None = None
    original_material: str | None = None
    dimensions: str | None = None
    description: str | None = None
    style: str | None = None
    artifacts: list[str] | None = None
    original_information: str | None = None


class DatasetDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    general_information: GeneralInformation = Field(default_factory=GeneralInformation)
    sculptures: list[SculptureRecord] = Field(default_factory=list)

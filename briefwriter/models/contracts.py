"""Schemas that raw completion output is decoded against."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class OutlineEntry(BaseModel):
    """One entry of the planner's outline."""

    model_config = ConfigDict(extra="ignore")

    type: Literal["INTRODUCTION", "LEARNING_AIM", "CRITERION", "CONCLUSION", "REFERENCES"]
    aim: str | None = None
    criterion: str | None = None
    title: str | None = None


class TableSpec(BaseModel):
    criterion: str = Field(min_length=1)
    title: str = ""


class ImageSpec(BaseModel):
    criterion: str = Field(min_length=1)
    caption: str = ""


class OutlineResponse(BaseModel):
    """Full planner response."""

    model_config = ConfigDict(extra="ignore")

    outline: list[OutlineEntry] = Field(min_length=1)
    tables: list[TableSpec] = Field(default_factory=list)
    images: list[ImageSpec] = Field(default_factory=list)


class TableResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    caption: str = ""
    headers: list[str] = Field(min_length=2, max_length=6)
    rows: list[list[str | int | float | None]] = Field(min_length=1)


class ReferenceEntry(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: str = Field(min_length=1)
    order: int | None = None
    id: int | None = None


class ReferencesResponse(BaseModel):
    references: list[ReferenceEntry] = Field(min_length=1)

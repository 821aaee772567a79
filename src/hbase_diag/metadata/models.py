"""Structured models for Kylin project and realization metadata."""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field

CUBE_KIND = "CUBE"


class RealizationEntry(BaseModel):
    """Reference from a project to one of its realizations."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    kind: str = Field(..., alias="type", description="Realization type, e.g. CUBE or HYBRID")
    name: str = Field(..., alias="realization")


class Segment(BaseModel):
    """Time-bounded partition of a cube, stored in one HBase table."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    storage_location_identifier: str | None = Field(
        default=None, description="HBase table backing the segment"
    )


class CubeRealization(BaseModel):
    """A cube and its segments, in segment order."""

    model_config = ConfigDict(extra="ignore")

    kind: Literal["CUBE"] = CUBE_KIND
    name: str
    segments: list[Segment] = Field(default_factory=list)


class UnsupportedRealization(BaseModel):
    """Any realization kind other than a cube (hybrids and the like)."""

    kind: str
    name: str


Realization = Union[CubeRealization, UnsupportedRealization]


class Project(BaseModel):
    """A Kylin project and the realizations it lists."""

    model_config = ConfigDict(extra="ignore")

    name: str
    realizations: list[RealizationEntry] = Field(default_factory=list)

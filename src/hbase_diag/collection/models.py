"""Outcome records for one bundle collection run."""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

from pydantic import BaseModel, Field


class ArtifactOutcome(BaseModel):
    """Result of attempting a single artifact."""

    name: str  # e.g. "table KYLIN_ABC" or "master-status"
    path: Path
    ok: bool
    error: str | None = None


class CollectionReport(BaseModel):
    """Everything one collect() call attempted, in attempt order."""

    base_url: str
    destination: Path
    resources: list[str] = Field(default_factory=list)
    outcomes: list[ArtifactOutcome] = Field(default_factory=list)
    collected_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def succeeded(self) -> list[ArtifactOutcome]:
        return [o for o in self.outcomes if o.ok]

    @property
    def failed(self) -> list[ArtifactOutcome]:
        return [o for o in self.outcomes if not o.ok]

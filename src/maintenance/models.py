# src/maintenance/models.py - v1
"""Maintenance run reports."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class TitleOutcome(BaseModel):
    """What happened to one title during a populate run."""

    title: str
    status: Literal["created", "skipped", "failed"]
    slug: str | None = None
    error: str | None = None


class PopulateResult(BaseModel):
    """Summary of a populate run over a title list."""

    total_titles: int
    created: int = 0
    skipped: int = 0
    failed: int = 0
    outcomes: list[TitleOutcome] = Field(default_factory=list)
    duration_seconds: float = 0.0


class BackfillResult(BaseModel):
    """Summary of a pass over stored topics."""

    scanned: int = 0
    updated: int = 0
    failed: int = 0
    duration_seconds: float = 0.0

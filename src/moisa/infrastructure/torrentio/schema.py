"""Pydantic models for the Torrentio stream response."""

from __future__ import annotations

import math
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from moisa.domain.entities.stremio import Candidate
from moisa.infrastructure.common.parsers import parse_int


def coerce_file_index(value: Any) -> int | None:
    """Accept integers and integer-like strings; everything else is unset."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) and value.is_integer() else None
    if isinstance(value, str):
        return parse_int(value)
    return None


class TorrentioBehaviorHints(BaseModel):
    model_config = ConfigDict(extra="ignore")

    filename: Optional[str] = None

    @field_validator("filename", mode="before")
    @classmethod
    def _non_string_is_unset(cls, v: Any) -> Any:
        return v if isinstance(v, str) else None


class TorrentioStream(BaseModel):
    """One entry of ``streams`` as returned by Torrentio."""

    model_config = ConfigDict(extra="ignore")

    info_hash: Optional[str] = Field(default=None, alias="infoHash")
    name: Optional[str] = None
    title: Optional[str] = None
    file_idx: Optional[int] = Field(default=None, alias="fileIdx")
    behavior_hints: Optional[TorrentioBehaviorHints] = Field(
        default=None, alias="behaviorHints"
    )

    @field_validator("info_hash", "name", "title", mode="before")
    @classmethod
    def _blank_is_unset(cls, v: Any) -> Any:
        if not isinstance(v, str) or not v:
            return None
        return v

    @field_validator("file_idx", mode="before")
    @classmethod
    def _coerce_file_idx(cls, v: Any) -> int | None:
        return coerce_file_index(v)

    @field_validator("behavior_hints", mode="before")
    @classmethod
    def _non_mapping_is_unset(cls, v: Any) -> Any:
        return v if isinstance(v, dict) else None

    def to_candidate(self) -> Candidate:
        filename = self.behavior_hints.filename if self.behavior_hints else None
        return Candidate(
            info_hash=self.info_hash,
            name=self.name,
            title=self.title,
            filename=filename or None,
            file_index=self.file_idx,
        )

"""Internal models shared by the selector, fetcher and merger."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class Fragment:
    route: str
    url: str
    document: Dict[str, Any]


@dataclass(frozen=True)
class MergeStats:
    fragments: int
    paths: int
    operations: int
    duplicates: int
    definitions: int


@dataclass(frozen=True)
class EndpointResult:
    endpoint: str
    success: bool
    error: str | None = None

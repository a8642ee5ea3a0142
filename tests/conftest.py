"""Pytest fixtures shared across all test modules."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest

from sportsdata_generator.config import EndpointRoutes
from sportsdata_generator.models import Fragment


def make_fragment(
    route: str,
    base_path: str = "/v3/nba/scores",
    paths: Optional[Dict[str, Any]] = None,
    definitions: Optional[Dict[str, Any]] = None,
    version: str = "1.0",
    **extra: Any,
) -> Fragment:
    """Build a minimal Swagger 2 fragment for ``route``."""
    document: Dict[str, Any] = {
        "swagger": "2.0",
        "info": {"title": f"{route} upstream", "version": version},
        "host": "api.sportsdata.io",
        "basePath": base_path,
        "schemes": ["https"],
        "paths": paths or {},
        "definitions": definitions or {},
        **extra,
    }
    return Fragment(route=route, url=f"https://example.test/{route}.json", document=document)


def make_operation(
    operation_id: str,
    parameters: Optional[List[Dict[str, Any]]] = None,
    responses: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    return {
        "operationId": operation_id,
        "parameters": parameters or [],
        "responses": responses or {"200": {"description": "OK"}},
    }


def write_json(path: Path, payload: Any) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


@pytest.fixture()
def registry_payload() -> Dict[str, Any]:
    return {
        "Scores": {
            "routes-v2": {
                "players": "https://example.test/v2/players.json",
                "standings": "https://example.test/v2/standings.json",
            },
            "routes-v3": {
                "players": "https://example.test/v3/players.json",
                "teams": "https://example.test/v3/teams.json",
            },
        },
        "Odds": {
            "routes-v2": {},
            "routes-v3": {"lines": "https://example.test/v3/lines.json"},
        },
    }


@pytest.fixture()
def registry(registry_payload: Dict[str, Any]) -> Dict[str, EndpointRoutes]:
    return {
        name: EndpointRoutes.model_validate(routes)
        for name, routes in registry_payload.items()
    }

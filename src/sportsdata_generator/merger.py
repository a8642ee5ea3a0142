"""Schema merger: folds an endpoint's fragments into one OpenAPI document."""

from __future__ import annotations

import copy
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from .logging import redact_url
from .models import Fragment, MergeStats


logger = logging.getLogger(__name__)

HTTP_METHODS = {"get", "put", "post", "delete", "options", "head", "patch"}

FORMAT_PARAMETER = "format"
FORMAT_DEFAULT = "JSON"
FORMAT_ENUM = ["JSON", "XML"]


class SchemaFormatError(Exception):
    pass


def split_base_path(base_path: str) -> Tuple[str, str]:
    """Split ``/v3/nba/scores`` into the API root ``/v3/nba`` and prefix ``scores``."""
    segments = [segment for segment in base_path.split("/") if segment]
    return "/" + "/".join(segments[:2]), "/".join(segments[2:])


def _parameter_priority(parameter: Any) -> Tuple[bool, bool, bool]:
    if not isinstance(parameter, Mapping):
        return False, False, True
    return (
        parameter.get("name") == FORMAT_PARAMETER,
        bool(parameter.get("default")),
        not parameter.get("required"),
    )


def sort_parameters(parameters: Iterable[Any]) -> List[Any]:
    """Order parameters: required first, defaulted later, ``format`` last.

    The sort is stable, so parameters with equal priority keep their
    upstream order.
    """
    return sorted(parameters, key=_parameter_priority)


def normalize_format_parameter(parameter: Dict[str, Any]) -> None:
    if parameter.get("name") == FORMAT_PARAMETER:
        parameter["default"] = FORMAT_DEFAULT
        parameter["enum"] = list(FORMAT_ENUM)


def default_response_descriptions(responses: Mapping[str, Any]) -> None:
    for response in responses.values():
        if isinstance(response, dict) and response.get("description") is None:
            response["description"] = ""


def rewrite_nullable(value: Any) -> Any:
    """Return ``value`` with every ``nullable`` key renamed to ``x-nullable``."""
    if isinstance(value, Mapping):
        rewritten: Dict[str, Any] = {}
        for key, item in value.items():
            if key == "nullable":
                continue
            rewritten[key] = rewrite_nullable(item)
        if "nullable" in value:
            rewritten["x-nullable"] = rewrite_nullable(value["nullable"])
        return rewritten
    if isinstance(value, list):
        return [rewrite_nullable(item) for item in value]
    return value


def _validate_fragment(fragment: Fragment) -> None:
    document = fragment.document
    where = f"route={fragment.route} url={redact_url(fragment.url)}"
    if not isinstance(document.get("basePath"), str):
        raise SchemaFormatError(f"Schema fragment missing basePath ({where})")
    if not isinstance(document.get("paths"), Mapping):
        raise SchemaFormatError(f"Schema fragment missing paths ({where})")
    info = document.get("info")
    if not isinstance(info, Mapping) or info.get("version") is None:
        raise SchemaFormatError(f"Schema fragment missing info.version ({where})")
    definitions = document.get("definitions")
    if definitions is not None and not isinstance(definitions, Mapping):
        raise SchemaFormatError(f"Schema fragment definitions must be an object ({where})")
    for path, path_item in document["paths"].items():
        if not isinstance(path_item, Mapping):
            raise SchemaFormatError(f"Path item {path} must be an object ({where})")


class MergeState:
    """Accumulator for one endpoint's merge run.

    The merged document is seeded from the first folded fragment; every later
    fragment contributes paths and definitions. Operation ids admitted so far
    are tracked in ``seen_operation_ids``, so an operation reissued by a later
    fragment is dropped (first fragment wins). Definitions are last-write-wins.
    """

    def __init__(self, endpoint: str) -> None:
        self.endpoint = endpoint
        self.document: Optional[Dict[str, Any]] = None
        self.seen_operation_ids: Set[str] = set()
        self.fragment_count = 0
        self.operation_count = 0
        self.duplicate_count = 0

    def fold(self, fragment: Fragment) -> None:
        _validate_fragment(fragment)
        source = copy.deepcopy(fragment.document)
        base_path, path_prefix = split_base_path(source["basePath"])

        if self.document is None:
            self.document = self._seed(source, base_path)

        for path, path_item in source["paths"].items():
            final_path = f"/{path_prefix}{path}" if path_prefix else path
            previous = self.document["paths"].get(final_path) or {}
            merged, dropped = self._merge_path_item(final_path, path_item)
            # A replaced path item keeps the earlier copies of operations dropped as duplicates.
            for method, operation in previous.items():
                if (
                    method not in merged
                    and isinstance(operation, dict)
                    and operation.get("operationId") in dropped
                ):
                    merged[method] = operation
            self.document["paths"][final_path] = merged

        for name, definition in (source.get("definitions") or {}).items():
            self.document["definitions"][name] = definition

        self.fragment_count += 1

    def result(self) -> Dict[str, Any]:
        if self.document is None:
            raise SchemaFormatError(f"No schema fragments to merge for endpoint {self.endpoint}")
        return rewrite_nullable(self.document)

    def stats(self) -> MergeStats:
        document = self.document or {}
        return MergeStats(
            fragments=self.fragment_count,
            paths=len(document.get("paths") or {}),
            operations=self.operation_count,
            duplicates=self.duplicate_count,
            definitions=len(document.get("definitions") or {}),
        )

    def _seed(self, source: Dict[str, Any], base_path: str) -> Dict[str, Any]:
        seed = dict(source)
        seed.update(
            {
                "basePath": base_path,
                "info": {
                    "title": self.endpoint,
                    "description": f"{self.endpoint} API",
                    "version": source["info"]["version"],
                },
                "paths": {},
                "definitions": {},
            }
        )
        return seed

    def _merge_path_item(
        self, path: str, path_item: Mapping[str, Any]
    ) -> Tuple[Dict[str, Any], Set[str]]:
        merged: Dict[str, Any] = {}
        dropped: Set[str] = set()
        for method, operation in path_item.items():
            if method.lower() not in HTTP_METHODS or not isinstance(operation, dict):
                merged[method] = operation
                continue

            operation_id = operation.get("operationId")
            if operation_id is not None:
                if operation_id in self.seen_operation_ids:
                    logger.debug(
                        "Dropping duplicate operation %s %s (%s)", method, path, operation_id
                    )
                    self.duplicate_count += 1
                    dropped.add(operation_id)
                    continue
                self.seen_operation_ids.add(operation_id)

            self._normalize_operation(operation)
            merged[method] = operation
            self.operation_count += 1
        return merged, dropped

    def _normalize_operation(self, operation: Dict[str, Any]) -> None:
        parameters = operation.get("parameters")
        if isinstance(parameters, list):
            operation["parameters"] = sort_parameters(parameters)
            for parameter in operation["parameters"]:
                if isinstance(parameter, dict):
                    normalize_format_parameter(parameter)

        responses = operation.get("responses")
        if isinstance(responses, Mapping):
            default_response_descriptions(responses)


def merge_fragments(endpoint: str, fragments: Iterable[Fragment]) -> Dict[str, Any]:
    """Fold ``fragments`` in order into a single merged document for ``endpoint``."""
    state = MergeState(endpoint)
    for fragment in fragments:
        state.fold(fragment)
    return state.result()

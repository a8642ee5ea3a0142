"""Route selection for one endpoint."""

from __future__ import annotations

import logging
from typing import Collection, Dict, Mapping

from .config import SUPPORTED_VERSIONS, ConfigError, EndpointRoutes


logger = logging.getLogger(__name__)


def select_routes(
    endpoint: str,
    registry: Mapping[str, EndpointRoutes],
    enabled_versions: Collection[str],
    allowed_routes: Collection[str],
) -> Dict[str, str]:
    """Return the ordered route name -> fragment URL mapping to fetch.

    Version tables are applied oldest first, so a v3 route replaces the v2
    route of the same name while keeping the position the v2 entry had.
    Routes outside ``allowed_routes`` are dropped.
    """
    routes = registry.get(endpoint)
    if routes is None:
        raise ConfigError(f"Unknown endpoint: {endpoint}")

    selected: Dict[str, str] = {}
    for version in SUPPORTED_VERSIONS:
        if version not in enabled_versions:
            continue
        selected.update(routes.table(version))

    allowed = set(allowed_routes)
    filtered = {name: url for name, url in selected.items() if name in allowed}
    skipped = len(selected) - len(filtered)
    if skipped:
        logger.debug("Skipping %s routes not in allow-list for endpoint=%s", skipped, endpoint)
    return filtered

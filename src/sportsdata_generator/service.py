"""Run orchestration: selects, fetches, merges and emits each endpoint in turn."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from .config import EndpointRoutes, RunConfig, Settings
from .emitter import DocumentEmitter, GenerationError
from .fetcher import FetchError, SchemaFetcher
from .logging import redact_url
from .merger import MergeState, SchemaFormatError
from .models import EndpointResult, Fragment
from .routes import select_routes

logger = logging.getLogger(__name__)


class GeneratorService:
    """
    Generates one client library per configured endpoint.

    Endpoints are processed one at a time in configuration order and routes
    are fetched in selector order; that order decides which fragment seeds the
    merged document and which copy of a duplicated operation survives.
    Fetch, schema and generator failures only fail their own endpoint.
    """

    def __init__(
        self,
        run_config: RunConfig,
        registry: Mapping[str, EndpointRoutes],
        fetcher: SchemaFetcher,
        emitter: DocumentEmitter,
    ) -> None:
        self.run_config = run_config
        self.registry = registry
        self.fetcher = fetcher
        self.emitter = emitter

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        run_config: RunConfig,
        registry: Mapping[str, EndpointRoutes],
    ) -> "GeneratorService":
        fetcher = SchemaFetcher(
            timeout_seconds=settings.generator_http_timeout_seconds,
            verify_ssl=settings.generator_http_verify_ssl,
        )
        emitter = DocumentEmitter(
            command=settings.generator_command,
            namespace_prefix=settings.generator_namespace_prefix,
            temp_directory=settings.generator_temp_directory,
        )
        return cls(run_config, registry, fetcher, emitter)

    async def run(self) -> List[EndpointResult]:
        results: List[EndpointResult] = []
        for endpoint in self.run_config.endpoints:
            results.append(await self.generate_endpoint_library(endpoint))

        failed = [result.endpoint for result in results if not result.success]
        logger.info(
            "Finished: %s generated, %s failed%s",
            len(results) - len(failed),
            len(failed),
            f" ({', '.join(failed)})" if failed else "",
        )
        return results

    async def build_schema(self, endpoint: str) -> Dict[str, Any]:
        routes = select_routes(
            endpoint,
            self.registry,
            self.run_config.versions,
            self.run_config.routes,
        )
        state = MergeState(endpoint)
        for route, url in routes.items():
            logger.info("Fetching route=%s url=%s", route, redact_url(url))
            document = await self.fetcher.fetch(url)
            state.fold(Fragment(route=route, url=url, document=document))

        document = state.result()
        stats = state.stats()
        logger.info(
            "Merged endpoint=%s fragments=%s paths=%s operations=%s duplicates=%s definitions=%s",
            endpoint,
            stats.fragments,
            stats.paths,
            stats.operations,
            stats.duplicates,
            stats.definitions,
        )
        return document

    async def generate_endpoint_library(self, endpoint: str) -> EndpointResult:
        try:
            document = await self.build_schema(endpoint)
            self.emitter.generate(endpoint, document, self.run_config.output_directory)
        except (FetchError, SchemaFormatError, GenerationError) as exc:
            logger.error("Could not generate library for endpoint: %s (%s)", endpoint, exc)
            return EndpointResult(endpoint=endpoint, success=False, error=str(exc))

        logger.info("Generated library for endpoint: %s", endpoint)
        return EndpointResult(endpoint=endpoint, success=True)

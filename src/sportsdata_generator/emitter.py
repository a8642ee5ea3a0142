"""Writes merged documents to disk and drives the external client generator."""

from __future__ import annotations

import json
import logging
import shlex
import subprocess
from pathlib import Path
from typing import Any, Dict, List, Optional


logger = logging.getLogger(__name__)

SCHEMA_FILENAME = "merged-schema.json"
GENERATOR_CONFIG_FILENAME = "generator-config.php"


class GenerationError(Exception):
    pass


def _php_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


class DocumentEmitter:
    def __init__(
        self,
        command: str = "jane-openapi",
        namespace_prefix: str = "Sportsdata\\API",
        temp_directory: str = "temp",
        working_directory: Optional[Path] = None,
    ) -> None:
        self.command = command
        self.namespace_prefix = namespace_prefix.rstrip("\\")
        self.working_directory = Path(working_directory or Path.cwd())
        self.temp_directory = self.working_directory / temp_directory

    def namespace(self, endpoint: str) -> str:
        return f"{self.namespace_prefix}\\{endpoint}"

    def output_path(self, endpoint: str, output_directory: str) -> Path:
        return self.working_directory / output_directory / endpoint

    def write_schema(self, document: Dict[str, Any]) -> Path:
        self.temp_directory.mkdir(parents=True, exist_ok=True)
        schema_path = self.temp_directory / SCHEMA_FILENAME
        schema_path.write_text(json.dumps(document, indent=4), encoding="utf-8")
        return schema_path

    def write_generator_config(self, schema_path: Path, namespace: str, directory: Path) -> Path:
        self.temp_directory.mkdir(parents=True, exist_ok=True)
        config_path = self.temp_directory / GENERATOR_CONFIG_FILENAME
        content = (
            "<?php return [\n"
            f"    'openapi-file' => {_php_string(str(schema_path))},\n"
            f"    'namespace' => {_php_string(namespace)},\n"
            f"    'directory' => {_php_string(str(directory))},\n"
            "];\n"
        )
        config_path.write_text(content, encoding="utf-8")
        return config_path

    def build_command(self, config_path: Path) -> List[str]:
        return [*shlex.split(self.command), "generate", f"--config-file={config_path}"]

    def generate(self, endpoint: str, document: Dict[str, Any], output_directory: str) -> Path:
        """Persist ``document`` and run the generator for ``endpoint``.

        Returns the generated library directory. Raises ``GenerationError``
        when the input files cannot be written or the generator is missing,
        exits non-zero or prints anything.
        """
        directory = self.output_path(endpoint, output_directory)
        try:
            schema_path = self.write_schema(document)
            config_path = self.write_generator_config(
                schema_path, self.namespace(endpoint), directory
            )
        except OSError as exc:
            raise GenerationError(
                f"Could not write generator input for endpoint {endpoint}: {exc}"
            ) from exc

        command = self.build_command(config_path)
        logger.info("Generating library for endpoint: %s", endpoint)
        try:
            completed = subprocess.run(
                command,
                cwd=self.working_directory,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                check=False,
            )
        except OSError as exc:
            raise GenerationError(f"Could not run generator {command[0]}: {exc}") from exc

        output = "\n".join(
            line.strip() for line in (completed.stdout or "").splitlines() if line.strip()
        )
        if completed.returncode != 0 or output:
            detail = output or f"exit code {completed.returncode}"
            raise GenerationError(f"Generator failed for endpoint {endpoint}: {detail}")
        return directory

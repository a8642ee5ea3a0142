"""Merge locally saved schema fragments for one endpoint without running the generator."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from sportsdata_generator.merger import MergeState, SchemaFormatError
from sportsdata_generator.models import Fragment


def _load_fragment(path: Path) -> Fragment:
    with path.open("r", encoding="utf-8") as handle:
        document: Dict[str, Any] = json.load(handle)
    return Fragment(route=path.stem, url=path.as_uri(), document=document)


def main() -> None:
    parser = argparse.ArgumentParser(description="Merge saved OpenAPI fragments for one endpoint")
    parser.add_argument("endpoint", help="Endpoint name used for info.title and the description")
    parser.add_argument(
        "fragments",
        nargs="+",
        help="Fragment JSON files, in the order they should be merged",
    )
    parser.add_argument(
        "--output",
        default="",
        help="Write the merged document here instead of stdout",
    )

    args = parser.parse_args()
    paths: List[Path] = [Path(item).expanduser().resolve() for item in args.fragments]
    missing = [str(path) for path in paths if not path.exists()]
    if missing:
        raise SystemExit(f"Fragment file not found: {', '.join(missing)}")

    state = MergeState(args.endpoint)
    try:
        for path in paths:
            state.fold(_load_fragment(path))
        document = state.result()
    except SchemaFormatError as exc:
        raise SystemExit(str(exc)) from exc

    payload = json.dumps(document, indent=2)
    if args.output:
        Path(args.output).write_text(payload + "\n", encoding="utf-8")
    else:
        print(payload)

    stats = state.stats()
    print(
        f"Merged {stats.fragments} fragments: {stats.paths} paths, {stats.operations} operations "
        f"({stats.duplicates} duplicates dropped), {stats.definitions} definitions",
        file=sys.stderr,
    )


if __name__ == "__main__":
    main()

"""Sources and source sets.

A source pairs a name with the JSON documents sampled for it and, once
discovered, the schema describing them. A source set is the ordered input of a
composition run and receives the unified schema when composition finishes.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from loguru import logger

from schema_composer.errors import SourceLoadError
from schema_composer.schema.model import PerSourceSchema, UnifiedSchema


@dataclass(eq=False)
class Source:
    """One JSON document collection and its (possibly not yet discovered) schema."""

    name: str
    raw_documents: list[Any] = field(default_factory=list)
    schema: PerSourceSchema | None = None

    def discover(self) -> PerSourceSchema:
        """Run the default discoverer and keep its result on this source."""
        from schema_composer.schema.discovery import discover_schema

        self.schema = discover_schema(self)
        return self.schema


@dataclass(eq=False)
class SourceSet:
    """Ordered collection of sources plus the schema composed from them."""

    name: str
    sources: list[Source] = field(default_factory=list)
    composed_schema: UnifiedSchema | None = None

    def add_source(self, source: Source) -> Source:
        self.sources.append(source)
        return source

    def get_source(self, name: str) -> Source | None:
        for source in self.sources:
            if source.name == name:
                return source
        return None

    def raw_documents(self, source_name: str) -> list[Any]:
        """Documents sampled for ``source_name``; empty when the source is unknown."""
        source = self.get_source(source_name)
        if source is None:
            return []
        return source.raw_documents


# --- Loading ---


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise SourceLoadError(f"Invalid JSON: {e}", str(path)) from e
    except OSError as e:
        raise SourceLoadError(f"Cannot read file: {e}", str(path)) from e


def load_source(path: str | Path, name: str | None = None) -> Source:
    """Load a source from a JSON file or a directory of JSON files.

    Args:
        path: A ``.json`` file, or a directory whose ``*.json`` files are read
            in sorted order, one document per file.
        name: Source name. Defaults to the file stem or directory name.

    Returns:
        A Source with its raw documents and no schema yet.

    Raises:
        SourceLoadError: If the path does not exist or a file is not valid JSON.
    """
    path = Path(path)
    if not path.exists():
        raise SourceLoadError("Source path does not exist", str(path))

    if path.is_dir():
        files = sorted(path.glob("*.json"))
        documents = [_read_json(f) for f in files]
        source_name = name or path.name
    else:
        documents = [_read_json(path)]
        source_name = name or path.stem

    logger.debug(f"Loaded source {source_name} with {len(documents)} document(s) from {path}")
    return Source(name=source_name, raw_documents=documents)

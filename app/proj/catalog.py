"""Flat-file catalog of named projection definitions.

The catalog uses the proj ``esri`` init-file layout::

    # WGS 84 / UTM zone 14N
    <32614> +proj=utm +zone=14 +ellps=WGS84 +datum=WGS84 +units=m +no_defs  <>

A ``# `` line introduces an entry name; an immediately following ``<`` line
holds its parameters. Trailing whitespace (including CR from CRLF files) is
trimmed from entry names, so a name compares equal to the WKT name it
spells regardless of how the file was saved. Entries keep file order
because matching returns the first compatible entry.
"""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass
from importlib import resources
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from .errors import MissingCatalog
from .names import catalog_form

logger = logging.getLogger(__name__)

NAME_PREFIX = "# "
PARAMS_PREFIX = "<"
BRACKET_RE = re.compile(r"<\w*>")

CATALOG_ENV = "PRJ_CATALOG_PATH"
PACKAGED_CATALOG = ("app.proj", "data/esri")


@dataclass(frozen=True)
class CatalogEntry:
    name: str
    parameters: Tuple[str, ...] = ()

    def compatible_with(self, target: str) -> bool:
        """True when this entry's name, at its own length, is a prefix of ``target``."""
        n = len(self.name)
        return target[:n].lower() == self.name.lower()


def _entry_name(line: str) -> str:
    # Slashes separate datum and projection in the catalog but never in WKT names
    return line.replace("/ ", "").replace(NAME_PREFIX, "").rstrip()


def _entry_parameters(line: str) -> Tuple[str, ...]:
    cleaned = BRACKET_RE.sub("", line).strip()
    return tuple(cleaned.split())


def parse_catalog(lines: Iterable[str]) -> "Catalog":
    entries: List[CatalogEntry] = []
    it = iter(lines)
    pending: Optional[str] = None
    while True:
        if pending is not None:
            line, pending = pending, None
        else:
            try:
                line = next(it)
            except StopIteration:
                break
        line = line.rstrip("\r\n")
        if not line.startswith(NAME_PREFIX):
            continue
        name = _entry_name(line)
        params: Tuple[str, ...] = ()
        try:
            following = next(it).rstrip("\r\n")
        except StopIteration:
            following = None
        if following is not None:
            if following.startswith(PARAMS_PREFIX):
                params = _entry_parameters(following)
            else:
                # Not a parameter line, it may introduce the next entry
                pending = following
        if not name:
            logger.debug("Skipping catalog entry without a name")
            continue
        entries.append(CatalogEntry(name=name, parameters=params))
    return Catalog(tuple(entries))


@dataclass(frozen=True)
class Catalog:
    entries: Tuple[CatalogEntry, ...] = ()
    source: str = "<memory>"

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(self.entries)

    def names(self) -> List[str]:
        return [e.name for e in self.entries]

    def match(self, name: str) -> Optional[CatalogEntry]:
        """Return the first entry whose name is a case-insensitive prefix of ``name``.

        File order alone decides between several compatible entries; a shorter
        name listed earlier wins over a longer, more specific one listed later.
        """
        target = catalog_form(name)
        if not target:
            return None
        for entry in self.entries:
            if entry.compatible_with(target):
                return entry
        return None


def catalog_path(path: Optional[str] = None) -> str:
    """Resolve the catalog location: explicit path, then $PRJ_CATALOG_PATH, then the packaged file."""
    if path:
        return str(path)
    env = os.getenv(CATALOG_ENV)
    if env:
        return env
    package, rel = PACKAGED_CATALOG
    return str(resources.files(package).joinpath(rel))


def read_catalog(path: str) -> Catalog:
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            parsed = parse_catalog(f)
    except OSError as e:
        raise MissingCatalog(path) from e
    logger.debug("Loaded %d catalog entries from %s", len(parsed), path)
    return Catalog(parsed.entries, source=path)


# Read-only once loaded; shared by every resolution in the process
_CATALOGS: Dict[str, Catalog] = {}


def load_catalog(path: Optional[str] = None) -> Catalog:
    resolved = catalog_path(path)
    cat = _CATALOGS.get(resolved)
    if cat is None:
        cat = read_catalog(resolved)
        _CATALOGS[resolved] = cat
    return cat


def clear_catalog_cache() -> None:
    _CATALOGS.clear()


__all__ = [
    "CatalogEntry",
    "Catalog",
    "parse_catalog",
    "read_catalog",
    "load_catalog",
    "catalog_path",
    "clear_catalog_cache",
]

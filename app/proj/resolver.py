"""Resolve a projection descriptor from a vector file's companion .prj text.

Pipeline: WKT tag/name extraction -> name normalization -> catalog match ->
parameter translation. Every way of not finding a projection is a
``Resolution`` with a reason, never an exception; only a missing catalog
(``MissingCatalog``) aborts.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from shape.prj_io import find_prj, read_prj_text

from .catalog import Catalog, load_catalog
from .descriptor import ProjectionDescriptor
from .geodesy import lookup_ellipsoid, lookup_utm_zone
from .names import normalize_name
from .translate import EllipsoidLookup, ZoneLookup, translate_parameters
from .wkt import ProjectionText, WKTTag

logger = logging.getLogger(__name__)


class ResolutionReason(str, Enum):
    OK = "OK"
    NO_FILE = "NoFile"
    UNRECOGNIZED_TAG = "UnrecognizedTag"
    NAME_NOT_FOUND = "NameNotFound"
    NO_PARAMETERS = "NoParameters"


@dataclass(frozen=True)
class Resolution:
    """Outcome of one resolution.

    Outcomes other than OK carry ``descriptor=None`` rather than a filled-in
    value, so an empty result cannot be mistaken for a resolved projection
    whose fields happen to be at their defaults. ``descriptor_or_default``
    gives the all-defaults ``ProjectionDescriptor()`` for those outcomes.
    """

    reason: ResolutionReason
    descriptor: Optional[ProjectionDescriptor] = None
    matched_name: Optional[str] = None
    searched_name: Optional[str] = None
    tag: Optional[WKTTag] = None
    source: Optional[str] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.reason is ResolutionReason.OK

    @property
    def is_empty(self) -> bool:
        return self.descriptor is None

    @property
    def descriptor_or_default(self) -> ProjectionDescriptor:
        return self.descriptor if self.descriptor is not None else ProjectionDescriptor()


def _qualified(fn) -> str:
    name = getattr(fn, "__qualname__", None)
    # Lambdas and closures share a qualname across instances
    if not name or "<" in name:
        return f"{type(fn).__name__}@{id(fn):x}"
    return f"{fn.__module__}.{name}"


class Resolver:
    """Resolves projection descriptors against one read-only catalog.

    The catalog is either given directly or loaded (and memoized) from
    ``catalog_path`` on first use, so outcomes that never reach the catalog
    do not require it.
    """

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        catalog_path: Optional[str] = None,
        ellipsoids: EllipsoidLookup = lookup_ellipsoid,
        zones: ZoneLookup = lookup_utm_zone,
    ):
        self._catalog = catalog
        self.catalog_path = catalog_path
        self.ellipsoids = ellipsoids
        self.zones = zones

    @property
    def catalog(self) -> Catalog:
        if self._catalog is None:
            self._catalog = load_catalog(self.catalog_path)
        return self._catalog

    def cache_token(self) -> str:
        """Identifies what a resolution depends on besides the text: catalog and lookups."""
        return "|".join(
            [self.catalog.source, _qualified(self.ellipsoids), _qualified(self.zones)]
        )

    def _empty(self, reason: ResolutionReason, message: str, **kw) -> Resolution:
        logger.info(message, extra={"reason": reason.value, "prj": kw.get("source")})
        return Resolution(reason=reason, message=message, **kw)

    def resolve_text(self, text: str, source: Optional[str] = None) -> Resolution:
        prj = ProjectionText(text or "")
        label = source or "projection text"
        tag = prj.tag
        if tag is WKTTag.UNRECOGNIZED:
            return self._empty(
                ResolutionReason.UNRECOGNIZED_TAG,
                f"Unable to handle projection for {label}",
                tag=tag,
                source=source,
            )

        searched = normalize_name(prj.name)
        logger.info("Searching for %s projection...", searched, extra={"prj": source})
        entry = self.catalog.match(searched)
        if entry is None:
            return self._empty(
                ResolutionReason.NAME_NOT_FOUND,
                f"{searched} projection not found",
                tag=tag,
                searched_name=searched,
                source=source,
            )
        if not entry.parameters:
            return self._empty(
                ResolutionReason.NO_PARAMETERS,
                f"No projection values exist for {searched}",
                tag=tag,
                searched_name=searched,
                matched_name=entry.name,
                source=source,
            )

        desc = translate_parameters(
            entry.name, entry.parameters, ellipsoids=self.ellipsoids, zones=self.zones
        )
        message = f"{entry.name} projection found!"
        logger.info(message, extra={"reason": ResolutionReason.OK.value, "prj": source})
        return Resolution(
            reason=ResolutionReason.OK,
            descriptor=desc,
            matched_name=entry.name,
            searched_name=searched,
            tag=tag,
            source=source,
            message=message,
        )

    def resolve_file(self, prj_path: str) -> Resolution:
        try:
            text = read_prj_text(prj_path)
        except OSError:
            return self._empty(
                ResolutionReason.NO_FILE,
                f"No projection file found for {prj_path}",
                source=prj_path,
            )
        return self.resolve_text(text, source=prj_path)

    def resolve_for(self, data_path: str) -> Resolution:
        """Resolve the projection of a data file (e.g. a .shp) from its companion file."""
        prj_path = find_prj(data_path)
        if prj_path is None:
            return self._empty(
                ResolutionReason.NO_FILE,
                f"No projection file found for {data_path}",
                source=data_path,
            )
        return self.resolve_file(prj_path)


_default: Optional[Resolver] = None


def default_resolver() -> Resolver:
    global _default
    if _default is None:
        _default = Resolver()
    return _default


def resolve_prj_text(text: str) -> Resolution:
    return default_resolver().resolve_text(text)


__all__ = [
    "ResolutionReason",
    "Resolution",
    "Resolver",
    "default_resolver",
    "resolve_prj_text",
]

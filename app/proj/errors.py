from __future__ import annotations


class ProjectionError(Exception):
    """Base class for failures that stop a projection resolution."""


class UsageError(ProjectionError, ValueError):
    """The caller asked for fewer results than the read contract provides."""


class MissingCatalog(ProjectionError, FileNotFoundError):
    """The projection catalog resource could not be opened."""

    def __init__(self, path: str):
        super().__init__(f"Projection catalog not found: {path}")
        self.path = path


class UnknownEllipsoid(ProjectionError, KeyError):
    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self) -> str:
        return f"Unknown ellipsoid: {self.name!r}"


class UnknownZone(ProjectionError, ValueError):
    pass


__all__ = [
    "ProjectionError",
    "UsageError",
    "MissingCatalog",
    "UnknownEllipsoid",
    "UnknownZone",
]

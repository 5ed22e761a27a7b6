"""Projection resolution from Esri .prj (WKT) text.

Modules:
 - wkt: top-level tag classification and projection name extraction
 - names: Esri name rewrites before catalog lookup
 - catalog: flat-file catalog of named proj4 parameter sets
 - geodesy: ellipsoid and UTM zone lookups
 - translate: proj4 tokens -> ProjectionDescriptor
 - resolver: the pipeline and its outcomes
 - diagnostics: JSON packing of outcomes
"""

__all__ = [
    "catalog",
    "descriptor",
    "diagnostics",
    "errors",
    "geodesy",
    "names",
    "resolver",
    "translate",
    "wkt",
]

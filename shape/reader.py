from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple

import geopandas as gpd
import pandas as pd
import shapely

BBox = Tuple[Tuple[float, float], Tuple[float, float]]  # ((xmin, ymin), (xmax, ymax))
Selector = Tuple[Any, ...]  # (predicate, attr_name, ...)


@dataclass(frozen=True)
class ReadOptions:
    record_numbers: Optional[Sequence[int]] = None  # 1-based, file order
    bounding_box: Optional[BBox] = None
    selector: Optional[Selector] = None
    attributes: Optional[Sequence[str]] = None  # None keeps every attribute
    use_geo_coords: bool = False

    def __post_init__(self) -> None:
        if self.selector is not None:
            if len(self.selector) < 2 or not callable(self.selector[0]):
                raise ValueError("selector must be (predicate, attribute_name, ...)")
        if self.bounding_box is not None:
            (xmin, ymin), (xmax, ymax) = self.bounding_box
            if xmin > xmax or ymin > ymax:
                raise ValueError("bounding_box must be ((xmin, ymin), (xmax, ymax))")


def _coordinate_columns(use_geo_coords: bool) -> Tuple[str, str]:
    return ("Lon", "Lat") if use_geo_coords else ("X", "Y")


def _apply_selector(frame: gpd.GeoDataFrame, selector: Selector) -> gpd.GeoDataFrame:
    predicate: Callable[..., Any] = selector[0]
    names = list(selector[1:])
    missing = [n for n in names if n not in frame.columns]
    if missing:
        raise KeyError(f"selector attributes not found: {missing}")
    keep = [bool(predicate(*row)) for row in frame[names].itertuples(index=False, name=None)]
    return frame[keep]


def read_vector_data(path: str, options: Optional[ReadOptions] = None) -> Tuple[gpd.GeoDataFrame, pd.DataFrame]:
    """Read features and attributes of a vector file, independent of its projection.

    Returns ``(records, attributes)``. ``records`` keeps the geometry plus
    per-feature vertex coordinate arrays (``X``/``Y``, or ``Lon``/``Lat``
    when ``use_geo_coords``); ``attributes`` is a plain DataFrame sharing the
    same index (record number - 1).
    """
    opts = options or ReadOptions()
    frame = gpd.read_file(path)
    frame.index = pd.RangeIndex(len(frame))

    if opts.record_numbers is not None:
        wanted = sorted({int(n) - 1 for n in opts.record_numbers if 1 <= int(n) <= len(frame)})
        frame = frame.loc[wanted]
    if opts.bounding_box is not None:
        (xmin, ymin), (xmax, ymax) = opts.bounding_box
        frame = frame.cx[xmin:xmax, ymin:ymax]
    if opts.selector is not None:
        frame = _apply_selector(frame, opts.selector)

    geom_col = frame.geometry.name
    attr_cols = [c for c in frame.columns if c != geom_col]
    if opts.attributes is not None:
        unknown = [a for a in opts.attributes if a not in attr_cols]
        if unknown:
            raise KeyError(f"attributes not found: {unknown}")
        attr_cols = list(opts.attributes)

    xcol, ycol = _coordinate_columns(opts.use_geo_coords)
    coords = [shapely.get_coordinates(g) if g is not None else None for g in frame.geometry]
    records = gpd.GeoDataFrame(
        {
            xcol: [c[:, 0] if c is not None else None for c in coords],
            ycol: [c[:, 1] if c is not None else None for c in coords],
        },
        geometry=frame.geometry.values,
        index=frame.index,
        crs=frame.crs,
    )
    attributes = pd.DataFrame(frame[attr_cols])
    return records, attributes


__all__ = ["ReadOptions", "read_vector_data"]

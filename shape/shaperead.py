from __future__ import annotations

import logging
from typing import Any, Callable, Optional, Tuple

from app.proj.errors import UsageError
from app.proj.resolver import Resolver, default_resolver
from shape.reader import ReadOptions, read_vector_data

logger = logging.getLogger(__name__)

MIN_RESULTS = 2
MAX_RESULTS = 3
# Attribute columns named like a coordinate column (X, Y, Lon, Lat) get this suffix when joined
ATTRIBUTE_SUFFIX = "_attr"


def shaperead(
    filename: str,
    nargout: int = MIN_RESULTS,
    resolver: Optional[Resolver] = None,
    reader: Callable[..., Tuple[Any, Any]] = read_vector_data,
    **options: Any,
) -> Tuple[Any, ...]:
    """Read a vector file together with the projection described by its companion .prj.

    ``nargout`` is the number of results wanted:
      2 -> (descriptor, records) with attributes joined onto the records; an
           attribute sharing a coordinate column name is kept as e.g. ``X_attr``
      3 -> (descriptor, records, attributes)

    The descriptor is None when no projection could be resolved; records are
    read either way. ``options`` are ReadOptions fields (record_numbers,
    bounding_box, selector, attributes, use_geo_coords).

    Raises UsageError before touching the filesystem when fewer than two
    results are requested.
    """
    if nargout < MIN_RESULTS:
        raise UsageError("Insufficient output variables, minimum is descriptor and records")
    if nargout > MAX_RESULTS:
        raise UsageError(f"Too many output variables, maximum is {MAX_RESULTS}")
    try:
        opts = ReadOptions(**options)
    except (TypeError, ValueError) as e:
        raise UsageError(str(e)) from e

    res = (resolver or default_resolver()).resolve_for(filename)
    records, attributes = reader(filename, opts)
    logger.debug("Read %d records from %s (projection: %s)", len(records), filename, res.reason.value)

    if nargout == MIN_RESULTS:
        return res.descriptor, records.join(attributes, rsuffix=ATTRIBUTE_SUFFIX)
    return res.descriptor, records, attributes


__all__ = ["shaperead"]

from __future__ import annotations

from typing import Any, Dict

from .resolver import Resolution


def pack_resolution(res: Resolution) -> Dict[str, Any]:
    """Flatten a Resolution into the JSON shape returned by the API and the CLI."""
    return {
        "reason": res.reason.value,
        "tag": res.tag.value if res.tag is not None else None,
        "searched_name": res.searched_name,
        "matched_name": res.matched_name,
        "source": res.source,
        "message": res.message,
        "descriptor": res.descriptor.to_dict() if res.descriptor is not None else None,
    }


__all__ = ["pack_resolution"]

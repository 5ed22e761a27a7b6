from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class WKTTag(str, Enum):
    GEOGRAPHIC = "Geographic"
    PROJECTED = "Projected"
    UNRECOGNIZED = "Unrecognized"


# Only the top-level keyword is inspected; the rest of the WKT grammar is not parsed.
_TAG_PREFIXES = {
    "GEOGCS": WKTTag.GEOGRAPHIC,
    "PROJCS": WKTTag.PROJECTED,
}
_PREFIX_LEN = 6


def classify_wkt(text: str) -> WKTTag:
    head = (text or "")[:_PREFIX_LEN].upper()
    return _TAG_PREFIXES.get(head, WKTTag.UNRECOGNIZED)


def extract_name(text: str) -> str:
    """Return the first double-quoted segment of a WKT string.

    'PROJCS["NAD_1983_UTM_Zone_14N",GEOGCS[...' -> 'NAD_1983_UTM_Zone_14N'

    Fewer than two quote characters yields an empty name.
    """
    _, sep, remain = (text or "").partition('"')
    if not sep:
        return ""
    name, sep, _ = remain.partition('"')
    if not sep:
        return ""
    return name


@dataclass(frozen=True)
class ProjectionText:
    """Raw content of a projection description (.prj) resource."""

    text: str

    @property
    def tag(self) -> WKTTag:
        return classify_wkt(self.text)

    @property
    def name(self) -> str:
        # Unrecognized tags carry no name
        if self.tag is WKTTag.UNRECOGNIZED:
            return ""
        return extract_name(self.text)


__all__ = ["WKTTag", "ProjectionText", "classify_wkt", "extract_name"]

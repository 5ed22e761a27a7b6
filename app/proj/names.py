from __future__ import annotations

import re
from typing import List, Optional, Tuple

# -----------------------------
# Esri WKT name -> catalog name rewrites
# -----------------------------

# (prefix, old substring, new substring). Order matters: the first rule whose
# prefix matches is the only one applied.
NAME_REWRITES: List[Tuple[str, str, str]] = [
    ("WGS_1984", "WGS_1984", "WGS_84"),  # UTM names
    ("NAD_1983_CSRS", "NAD_1983_CSRS", "NAD83(CSRS98)"),
    ("GCS_WGS_1984", "GCS_WGS_1984", "WGS_84"),  # geographic
    ("NAD_1983_StatePlane", "NAD_1983_StatePlane", "NAD_1983_HARN_StatePlane"),
]

# StatePlane names quoting feet already match the catalog as they are
FEET_RE = re.compile(r"Feet", re.IGNORECASE)


def _matching_rule(name: str) -> Optional[Tuple[str, str, str]]:
    for rule in NAME_REWRITES:
        prefix = rule[0]
        if name[: len(prefix)].upper() == prefix.upper():
            return rule
    return None


def normalize_name(name: str) -> str:
    """Rewrite known Esri naming irregularities so the name can be found in the catalog.

    At most one rewrite is applied, then underscores become spaces:

        'WGS_1984_UTM_Zone_14N'            -> 'WGS 84 UTM Zone 14N'
        'NAD_1983_StatePlane_Texas_...'    -> 'NAD 1983 HARN StatePlane Texas ...'
        'NAD_1983_StatePlane_..._Feet'     -> 'NAD 1983 StatePlane ... Feet'
    """
    rule = _matching_rule(name or "")
    out = name or ""
    if rule is not None:
        prefix, old, new = rule
        feet_state_plane = prefix == "NAD_1983_StatePlane" and FEET_RE.search(out)
        if not feet_state_plane:
            out = out.replace(old, new)
    return catalog_form(out)


def catalog_form(name: str) -> str:
    # The catalog spells names with spaces, never underscores
    return (name or "").replace("_", " ")


__all__ = ["NAME_REWRITES", "normalize_name", "catalog_form"]

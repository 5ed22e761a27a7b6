#!/usr/bin/env python3
from __future__ import annotations

import argparse
import csv
import json
import os
import sys
from glob import glob
from typing import Dict, List, Optional

# Make the repo root importable when run from a checkout
THIS_DIR = os.path.dirname(__file__)
ROOT_DIR = os.path.abspath(os.path.join(THIS_DIR, ".."))
if ROOT_DIR not in sys.path:
    sys.path.insert(0, ROOT_DIR)

from app.logging_setup import configure_logging  # type: ignore
from app.proj.diagnostics import pack_resolution  # type: ignore
from app.proj.errors import MissingCatalog  # type: ignore
from app.proj.resolver import Resolver  # type: ignore


def _collect_paths(paths: List[str], pattern: Optional[str]) -> List[str]:
    """Expand directories with the comma-separated glob pattern; plain files pass through."""
    out: List[str] = []
    pats = [p.strip() for p in (pattern or "*.shp").split(",") if p.strip()]
    for p in paths:
        if os.path.isdir(p):
            for pat in pats:
                out.extend(glob(os.path.join(p, pat)))
        else:
            out.append(p)
    return sorted(set(out))


def _fmt_row(row: Dict) -> str:
    desc = row.get("descriptor")
    if not desc:
        return f"{row['source']}: {row['reason']} ({row['message']})"
    zone = f" zone={desc['zone']}" if desc.get("zone") else ""
    return (
        f"{row['source']}: {row['matched_name']} -> {desc['kind']}{zone} "
        f"a={desc['ellipsoid']['semimajor_axis']:.3f} k={desc['scale_factor']}"
    )


def resolve_paths(paths: List[str], catalog: Optional[str] = None) -> List[dict]:
    resolver = Resolver(catalog_path=catalog)
    rows: List[dict] = []
    for path in paths:
        if path.lower().endswith(".prj"):
            res = resolver.resolve_file(path)
        else:
            res = resolver.resolve_for(path)
        row = pack_resolution(res)
        row["source"] = path
        rows.append(row)
    return rows


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Resolve projection descriptors from .prj companion files.")
    ap.add_argument("paths", nargs="+", help="Data files, .prj files or folders")
    ap.add_argument("--pattern", default="*.shp", help="Glob(s) used inside folders, comma-separated")
    ap.add_argument("--catalog", help="Projection catalog file (default: $PRJ_CATALOG_PATH or the packaged one)")
    ap.add_argument("--format", choices=["pretty", "json", "csv"], default="pretty")
    ap.add_argument("--output", help="Optional path to write JSON/CSV output")
    args = ap.parse_args(argv)

    configure_logging()
    paths = _collect_paths(args.paths, args.pattern)
    if not paths:
        print("No files matched. Adjust paths/--pattern.")
        return 1

    try:
        rows = resolve_paths(paths, catalog=args.catalog)
    except MissingCatalog as e:
        print(str(e), file=sys.stderr)
        return 2

    if args.format == "pretty":
        for row in rows:
            print(_fmt_row(row))
    elif args.format == "json":
        payload = json.dumps(rows, indent=2)
        if args.output:
            with open(args.output, "w") as f:
                f.write(payload)
            print(f"Wrote JSON to {args.output}")
        else:
            print(payload)
    else:
        out = open(args.output, "w", newline="") if args.output else sys.stdout
        try:
            w = csv.writer(out)
            w.writerow(["source", "reason", "matched_name", "kind", "zone"])
            for row in rows:
                desc = row.get("descriptor") or {}
                w.writerow([row["source"], row["reason"], row["matched_name"] or "", desc.get("kind", ""), desc.get("zone") or ""])
        finally:
            if args.output:
                out.close()
                print(f"Wrote CSV to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())

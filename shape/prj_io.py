from typing import List, Optional
import os

DEFAULT_EXTENSIONS = (".prj", ".PRJ")


def prj_extensions() -> List[str]:
    """Companion extensions tried in order; override with PRJ_EXTENSIONS=.prj,.PRJ"""
    env = os.getenv("PRJ_EXTENSIONS")
    if env:
        exts = [e.strip() for e in env.split(",") if e.strip()]
        return [e if e.startswith(".") else "." + e for e in exts]
    return list(DEFAULT_EXTENSIONS)


def find_prj(data_path: str) -> Optional[str]:
    """
    Locate the projection description stored beside a data file:
    same directory and base name, a recognized extension.
    A path that already carries one of the extensions is returned if it exists.
    Returns None when no companion file exists.
    """
    base, ext = os.path.splitext(data_path)
    exts = prj_extensions()
    if ext in exts and os.path.isfile(data_path):
        return data_path
    for e in exts:
        candidate = base + e
        if os.path.isfile(candidate):
            return candidate
    return None


def read_prj_text(path: str) -> str:
    """
    Reads the WKT text of a .prj file.
    Tries UTF-8 (a BOM is dropped) and falls back to latin-1, which always decodes.
    Surrounding whitespace is stripped so the top-level keyword starts the text.
    """
    with open(path, 'rb') as f:
        raw = f.read()

    try:
        text = raw.decode('utf-8-sig')
    except UnicodeDecodeError:
        text = raw.decode('latin-1')
    return text.strip()

from fastapi import APIRouter, UploadFile, File, Form, Query, Depends, Request, Body
from fastapi import HTTPException
import json
import logging
import os
import tempfile
from typing import Optional

from app.cache import resolution_key
from app.proj.diagnostics import pack_resolution
from app.proj.errors import MissingCatalog, UsageError
from app.proj.names import normalize_name
from app.proj.resolver import Resolution, Resolver, default_resolver
from app.proj.wkt import classify_wkt
from app.schemas import MatchResponse, ReadRequest, ReadResponse, ResolveResponse, ResolveTextRequest
from shape.prj_io import find_prj, read_prj_text
from shape.shaperead import shaperead

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/projection")


def get_resolver(request: Request) -> Resolver:
    # Apps/tests can inject a resolver bound to another catalog via app.state.resolver
    res = getattr(request.app.state, "resolver", None)
    return res if res is not None else default_resolver()


def _response(res: Resolution) -> ResolveResponse:
    return ResolveResponse(**pack_resolution(res))


async def _resolve_cached(request: Request, resolver: Resolver, text: str, source: Optional[str]) -> ResolveResponse:
    try:
        resolver_token = resolver.cache_token()
    except MissingCatalog as e:
        raise HTTPException(status_code=500, detail=str(e))

    cache = getattr(request.app.state, "cache", None)
    cache_key = resolution_key(text, resolver_token) if cache else None
    if cache and cache_key:
        cached = await cache.get_json(cache_key)
        if cached:
            try:
                return ResolveResponse(**{**cached, "source": source})
            except ValueError:
                # Corrupt cache entry: ignore
                pass

    resp = _response(resolver.resolve_text(text, source=source))
    if cache and cache_key:
        await cache.set_json(cache_key, resp.model_dump())
    return resp


@router.post("/resolve", response_model=ResolveResponse)
async def resolve(
    request: Request,
    file: UploadFile = File(None),
    path: str = Form(None),
    resolver: Resolver = Depends(get_resolver),
) -> ResolveResponse:
    """Resolve a projection from an uploaded .prj file or from a path.

    'path' may name the .prj itself or the data file it accompanies. A missing
    companion file is a NoFile outcome, not an HTTP error.
    """
    if file and path:
        raise HTTPException(status_code=400, detail="Provide either 'file' or 'path', not both")
    if not file and not path:
        raise HTTPException(status_code=400, detail="No file or path provided")

    if file:
        tmp_path: Optional[str] = None
        try:
            # Persist upload so it is decoded exactly like a .prj on disk
            with tempfile.NamedTemporaryFile(delete=False, suffix=".prj") as tmp:
                content = await file.read()
                if not content:
                    raise HTTPException(status_code=400, detail="Uploaded file is empty")
                tmp.write(content)
                tmp_path = tmp.name
            text = read_prj_text(tmp_path)
        finally:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
        return await _resolve_cached(request, resolver, text, file.filename)

    prj_path = find_prj(path)
    if prj_path is None:
        return _response(resolver.resolve_for(path))
    try:
        text = read_prj_text(prj_path)
    except PermissionError:
        raise HTTPException(status_code=403, detail=f"Permission denied: {prj_path}")
    except OSError:
        return _response(resolver.resolve_file(prj_path))
    return await _resolve_cached(request, resolver, text, prj_path)


@router.post("/resolve_text", response_model=ResolveResponse)
async def resolve_text(
    req: ResolveTextRequest,
    request: Request,
    resolver: Resolver = Depends(get_resolver),
) -> ResolveResponse:
    """Resolve raw WKT text.

    Body schema:
      { "text": "PROJCS[\\"WGS_1984_UTM_Zone_14N\\", ...]" }
    """
    return await _resolve_cached(request, resolver, req.text, None)


@router.get("/match", response_model=MatchResponse)
async def match(name: str = Query(...), resolver: Resolver = Depends(get_resolver)) -> MatchResponse:
    """Normalize an Esri projection name and look it up in the catalog."""
    normalized = normalize_name(name)
    try:
        entry = resolver.catalog.match(normalized)
    except MissingCatalog as e:
        raise HTTPException(status_code=500, detail=str(e))
    if entry is None:
        raise HTTPException(status_code=404, detail=f"{normalized} projection not found")
    return MatchResponse(
        name=name,
        normalized=normalized,
        matched_name=entry.name,
        parameters=list(entry.parameters),
    )


@router.get("/preview_prj")
async def preview_prj(path: str = Query(...)):
    """Raw companion projection text and its detected top-level tag, for manual testing."""
    prj_path = find_prj(path)
    if prj_path is None:
        raise HTTPException(status_code=404, detail=f"No projection file found for {path}")
    text = read_prj_text(prj_path)
    return {"path": prj_path, "tag": classify_wkt(text).value, "text": text}


@router.post("/read", response_model=ReadResponse)
async def read(req: ReadRequest = Body(...), resolver: Resolver = Depends(get_resolver)) -> ReadResponse:
    """Read features of a vector file along with its resolved projection.

    Body schema:
      {
        "path": "/data/roads.shp",
        "record_numbers": [1, 2],
        "bounding_box": [[xmin, ymin], [xmax, ymax]],
        "attributes": ["NAME"],
        "use_geo_coords": false,
        "with_attributes": true
      }
    """
    if not os.path.isfile(req.path):
        raise HTTPException(status_code=404, detail=f"Path not found: {req.path}")
    nargout = 3 if req.with_attributes else 2
    try:
        out = shaperead(
            req.path,
            nargout=nargout,
            resolver=resolver,
            record_numbers=req.record_numbers,
            bounding_box=req.bounding_box,
            attributes=req.attributes,
            use_geo_coords=req.use_geo_coords,
        )
    except UsageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except KeyError as e:
        raise HTTPException(status_code=422, detail=str(e))
    except MissingCatalog as e:
        raise HTTPException(status_code=500, detail=str(e))

    descriptor, records = out[0], out[1]
    features = json.loads(records.geometry.to_json())["features"]
    attributes = None
    if req.with_attributes:
        attributes = json.loads(out[2].to_json(orient="records"))
    return ReadResponse(
        descriptor=descriptor.to_dict() if descriptor is not None else None,
        count=len(records),
        features=features,
        attributes=attributes,
    )

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

ReasonName = Literal["OK", "NoFile", "UnrecognizedTag", "NameNotFound", "NoParameters"]


class EllipsoidModel(BaseModel):
    semimajor_axis: float = Field(default=1.0, description="Semimajor axis in meters")
    flattening: float = 0.0
    eccentricity: float = 0.0


class DescriptorModel(BaseModel):
    """Projection descriptor as returned by the API."""

    kind: str = "PlateCarree"
    origin: List[float] = Field(default_factory=lambda: [0.0, 0.0, 0.0], description="lat, lon, height")
    false_easting: float = 0.0
    false_northing: float = 0.0
    scale_factor: float = 1.0
    ellipsoid: EllipsoidModel = Field(default_factory=EllipsoidModel)
    zone: Optional[str] = None
    map_lat_limits: Optional[List[float]] = None
    map_lon_limits: Optional[List[float]] = None
    explicit: List[str] = Field(default_factory=list, description="Field groups set from catalog parameters")


class ResolveResponse(BaseModel):
    reason: ReasonName
    tag: Optional[Literal["Geographic", "Projected", "Unrecognized"]] = None
    searched_name: Optional[str] = None
    matched_name: Optional[str] = None
    source: Optional[str] = None
    message: str = ""
    descriptor: Optional[DescriptorModel] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "reason": "OK",
                "tag": "Projected",
                "searched_name": "WGS 84 UTM Zone 14N",
                "matched_name": "WGS 84 UTM zone 14N",
                "message": "WGS 84 UTM zone 14N projection found!",
                "descriptor": {
                    "kind": "UTM",
                    "ellipsoid": {"semimajor_axis": 6378137.0, "flattening": 0.0033528106647474805},
                    "zone": "14N",
                    "map_lat_limits": [0.0, 84.0],
                    "map_lon_limits": [-102.0, -96.0],
                    "explicit": ["ellipsoid", "zone"],
                },
            }
        }
    )


class ResolveTextRequest(BaseModel):
    text: str

    @field_validator("text")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("'text' must be a non-empty WKT string")
        return v


class MatchResponse(BaseModel):
    name: str
    normalized: str
    matched_name: str
    parameters: List[str] = Field(default_factory=list)


class ReadRequest(BaseModel):
    path: str
    record_numbers: Optional[List[int]] = None
    bounding_box: Optional[Tuple[Tuple[float, float], Tuple[float, float]]] = None
    attributes: Optional[List[str]] = None
    use_geo_coords: bool = False
    with_attributes: bool = Field(default=True, description="Return attributes separately (three results)")

    @field_validator("record_numbers")
    @classmethod
    def _positive(cls, v: Optional[List[int]]) -> Optional[List[int]]:
        if v is not None and any(int(n) < 1 for n in v):
            raise ValueError("record numbers are 1-based")
        return v


class ReadResponse(BaseModel):
    descriptor: Optional[DescriptorModel] = None
    count: int = 0
    features: List[Dict[str, Any]] = Field(default_factory=list)
    attributes: Optional[List[Dict[str, Any]]] = None

from typing import Dict, Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from drillgeo.config import get_parameters
from drillgeo.models.schemas import GeoPoint, LocalPoint, ProjectedPoint, RawPoint, TransformParameters
from drillgeo.services.helmert import HelmertTransform2D
from drillgeo.services.projector import GeodeticProjector

router = APIRouter(prefix="/api/transform", tags=["transform"])


class HelmertRequest(BaseModel):
    x: float
    y: float
    z: Optional[float] = None
    direction: Literal["forward", "inverse"] = "forward"


class GeographicRequest(BaseModel):
    easting: float
    northing: float


class ProjectedRequest(BaseModel):
    lat: float
    lon: float


@router.post("/helmert")
def transform_helmert(req: HelmertRequest, params: TransformParameters = Depends(get_parameters)) -> Dict:
    helmert = HelmertTransform2D(params.helmert)
    if req.direction == "forward":
        local = helmert.forward_raw(RawPoint(x=req.x, y=req.y, z=req.z))
        return {"direction": "forward", "local": local.model_dump()}
    raw = helmert.inverse_local(LocalPoint(x=req.x, y=req.y, z=req.z))
    return {"direction": "inverse", "raw": raw.model_dump()}


@router.post("/geographic")
def transform_to_geographic(req: GeographicRequest, params: TransformParameters = Depends(get_parameters)) -> Dict:
    projector = GeodeticProjector(params.projection)
    geo = projector.to_geographic(ProjectedPoint(easting=req.easting, northing=req.northing))
    if geo is None:
        raise HTTPException(status_code=400, detail="Point lies outside the valid projection domain")
    return {
        "geographic": geo.model_dump(),
        "grid_convergence": projector.grid_convergence(geo),
        "scale_factor": projector.point_scale_factor(geo),
    }


@router.post("/projected")
def transform_to_projected(req: ProjectedRequest, params: TransformParameters = Depends(get_parameters)) -> Dict:
    try:
        geo = GeoPoint(lat=req.lat, lon=req.lon)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    projected = GeodeticProjector(params.projection).to_projected(geo)
    if projected is None:
        raise HTTPException(status_code=400, detail="Point could not be projected")
    return {"projected": projected.model_dump()}

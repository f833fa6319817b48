import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from drillgeo.config import get_parameters
from drillgeo.models.schemas import PipelineResult, TransformParameters
from drillgeo.services.accuracy import (
    ReferencePair,
    ReferenceResidual,
    aggregate_max_residual,
    validate_reference_pairs,
)
from drillgeo.services.fields import canonicalize_rows, match_headers, missing_required
from drillgeo.services.helmert import HelmertTransform2D
from drillgeo.services.pipeline import TransformPipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/boreholes", tags=["boreholes"])


class BoreholeTransformRequest(BaseModel):
    rows: List[Dict[str, Any]]
    geographic: bool = True
    normalize: bool = False
    max_workers: Optional[int] = Field(default=None, ge=1, le=32)


class ReferenceValidationRequest(BaseModel):
    pairs: List[ReferencePair]


class ReferenceValidationResponse(BaseModel):
    residuals: List[ReferenceResidual]
    max_distance_m: Optional[float] = None


@router.get("/parameters")
def get_transform_parameters(params: TransformParameters = Depends(get_parameters)) -> Dict:
    return {
        "parameters": params.model_dump(),
        "helmert": HelmertTransform2D(params.helmert).describe(),
    }


@router.post("/transform", response_model=PipelineResult)
def transform_boreholes(
    req: BoreholeTransformRequest,
    params: TransformParameters = Depends(get_parameters),
) -> PipelineResult:
    mapping = match_headers(dict.fromkeys(key for row in req.rows for key in row))
    if req.rows:
        missing = missing_required(mapping)
        if missing:
            raise HTTPException(
                status_code=400,
                detail=f"Missing required columns: {', '.join(missing)}",
            )

    pipeline = TransformPipeline(
        params,
        geographic=req.geographic,
        normalize=req.normalize,
        max_workers=req.max_workers,
    )
    return pipeline.run(canonicalize_rows(req.rows, mapping))


@router.post("/validate", response_model=ReferenceValidationResponse)
def validate_references(
    req: ReferenceValidationRequest,
    params: TransformParameters = Depends(get_parameters),
) -> ReferenceValidationResponse:
    if not req.pairs:
        raise HTTPException(status_code=400, detail="At least one reference pair is required")
    residuals = validate_reference_pairs(params, req.pairs)
    worst = aggregate_max_residual([r.distance_m for r in residuals])
    logger.info("Reference check over %d pairs, worst residual %s m", len(residuals), worst)
    return ReferenceValidationResponse(residuals=residuals, max_distance_m=worst)

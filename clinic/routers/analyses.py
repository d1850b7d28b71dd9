from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import UUID4

from .. import oauth2
from ..config import settings
from ..dependencies import get_collections, get_stats_cache
from ..exceptions import ResourceNotFoundHTTPException
from ..schemas.analysis import AnalysisRecord, CreateAnalysis, ReturnAnalysis
from ..schemas.oauth2 import Identity
from ..schemas.user import Role
from ..stats_cache import StatsCache
from ..stores.base import Collections
from .appointments import ensure_user_with_role

router = APIRouter(prefix=settings.BASE_URL + "/analyses", tags=["AI Analyses"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ReturnAnalysis)
async def create_analysis(
    analysis: CreateAnalysis,
    collections: Collections = Depends(get_collections),
    stats_cache: StatsCache = Depends(get_stats_cache),
    staff: Identity = Depends(oauth2.get_staff),
):
    if staff.role == Role.doctor:
        doctor_id = staff.id
    elif analysis.doctor_id:
        doctor_id = analysis.doctor_id
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="doctor_id is required when recording an analysis as an admin",
        )

    await ensure_user_with_role(collections, doctor_id, Role.doctor)
    await ensure_user_with_role(collections, analysis.patient_id, Role.patient)

    new_analysis = await collections.analyses.insert_one(
        AnalysisRecord(
            doctor_id=doctor_id,
            patient_id=analysis.patient_id,
            ai_response=analysis.ai_response.model_dump()
            if analysis.ai_response
            else None,
            accuracy=analysis.accuracy,
        )
    )

    stats_cache.invalidate()

    return new_analysis


@router.delete("/{analysis_id}")
async def delete_analysis(
    analysis_id: UUID4,
    collections: Collections = Depends(get_collections),
    stats_cache: StatsCache = Depends(get_stats_cache),
    _=Depends(oauth2.get_admin),
):
    if not await collections.analyses.delete_one(analysis_id):
        raise ResourceNotFoundHTTPException(detail="Analysis not found")

    stats_cache.invalidate()

    return {"success": True, "message": "Analysis deleted"}

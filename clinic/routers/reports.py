from fastapi import APIRouter, Depends, status

from .. import oauth2
from ..config import settings
from ..dependencies import get_collections
from ..schemas.report import CreateReport, ReportRecord, ReturnReport
from ..schemas.user import Role
from ..stores.base import Collections
from .appointments import ensure_user_with_role

router = APIRouter(prefix=settings.BASE_URL + "/reports", tags=["Reports"])


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ReturnReport)
async def create_report(
    report: CreateReport,
    collections: Collections = Depends(get_collections),
    _=Depends(oauth2.get_staff),
):
    await ensure_user_with_role(collections, report.patient_id, Role.patient)

    return await collections.reports.insert_one(ReportRecord(**report.model_dump()))

import datetime

from pydantic import BaseModel


class ReturnDashboardStats(BaseModel):
    success: bool = True
    stats: dict[str, int]


class TrendPoint(BaseModel):
    date: datetime.datetime
    severity: str
    confidence: float
    accuracy: float | None = None
    diagnosis_count: int


class ReturnHealthTrends(BaseModel):
    success: bool = True
    trends: list[TrendPoint]

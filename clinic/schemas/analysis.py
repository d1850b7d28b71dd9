import datetime
import uuid

from pydantic import BaseModel, ConfigDict, Field, UUID4


class AIResponse(BaseModel):
    severity: str | None = None
    confidence: float | None = Field(None, ge=0, le=100)
    possible_diagnosis: list[str] = []


class CreateAnalysis(BaseModel):
    patient_id: UUID4
    doctor_id: UUID4 | None = None
    ai_response: AIResponse | None = None
    accuracy: float | None = Field(None, ge=0, le=100)


class AnalysisRecord(BaseModel):
    id: UUID4 = Field(default_factory=uuid.uuid4)
    doctor_id: UUID4
    patient_id: UUID4
    ai_response: dict | None = None
    accuracy: float | None = None
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.now)


class ReturnAnalysis(AnalysisRecord):
    model_config = ConfigDict(from_attributes=True)

import datetime
import uuid

from pydantic import BaseModel, ConfigDict, Field, UUID4


class CreateReport(BaseModel):
    patient_id: UUID4
    title: str = Field(min_length=1, max_length=200)


class ReportRecord(CreateReport):
    id: UUID4 = Field(default_factory=uuid.uuid4)
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.now)


class ReturnReport(ReportRecord):
    model_config = ConfigDict(from_attributes=True)

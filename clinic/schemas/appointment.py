import datetime
import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, UUID4


class AppointmentStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    completed = "completed"
    cancelled = "cancelled"


class BaseAppointment(BaseModel):
    doctor_id: UUID4
    appointment_date: datetime.datetime
    reason: str | None = Field(None, max_length=500)


class CreateAppointment(BaseAppointment):
    patient_id: UUID4 | None = None


class UpdateAppointmentStatus(BaseModel):
    status: AppointmentStatus


class AppointmentRecord(BaseAppointment):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    id: UUID4 = Field(default_factory=uuid.uuid4)
    patient_id: UUID4
    status: AppointmentStatus = AppointmentStatus.pending
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.now)


class ReturnAppointment(BaseAppointment):
    id: UUID4
    patient_id: UUID4
    status: AppointmentStatus
    created_at: datetime.datetime
    model_config = ConfigDict(from_attributes=True)

import datetime
import uuid
from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, EmailStr, Field, UUID4


class Role(str, Enum):
    admin = "admin"
    doctor = "doctor"
    patient = "patient"


class BloodGroup(str, Enum):
    a_positive = "A+"
    a_negative = "A-"
    b_positive = "B+"
    b_negative = "B-"
    ab_positive = "AB+"
    ab_negative = "AB-"
    o_positive = "O+"
    o_negative = "O-"


class EmergencyContact(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    phone: str = Field(min_length=3, max_length=30)
    relationship: str | None = Field(None, max_length=50)


class ProfileData(BaseModel):
    phone: str | None = None
    date_of_birth: datetime.date | None = None
    address: str | None = Field(None, max_length=300)
    blood_group: BloodGroup | None = None
    emergency_contact: EmergencyContact | None = None
    # doctors only
    specialization: str | None = None
    license_number: str | None = Field(None, max_length=50)


class UserData(ProfileData):
    name: str = Field(min_length=1, max_length=100)


class BaseUser(UserData):
    email: EmailStr
    role: Role = Role.patient


class CreateUser(BaseUser):
    pass


class UpdateUser(ProfileData):
    model_config = ConfigDict(use_enum_values=True)

    name: str | None = Field(None, min_length=1, max_length=100)
    is_active: bool | None = None
    role: Role | None = None


class UserRecord(BaseUser):
    model_config = ConfigDict(use_enum_values=True, validate_default=True)

    id: UUID4 = Field(default_factory=uuid.uuid4)
    is_active: bool = True
    created_at: datetime.datetime = Field(default_factory=datetime.datetime.now)


class ReturnUser(BaseUser):
    id: UUID4
    is_active: bool
    created_at: datetime.datetime
    model_config = ConfigDict(from_attributes=True)


class ReturnUsers(BaseModel):
    success: bool = True
    count: int
    users: List[ReturnUser]


class ReturnSingleUser(BaseModel):
    success: bool = True
    user: ReturnUser

import uuid

from sqlalchemy import JSON, Boolean, Column, Date, Float, ForeignKey, String, Uuid
from sqlalchemy.orm import relationship
from sqlalchemy.sql.expression import func
from sqlalchemy.sql.sqltypes import TIMESTAMP

from .database import Base


class User(Base):
    __tablename__ = "users"
    id = Column(Uuid, primary_key=True, nullable=False, default=uuid.uuid4)
    email = Column(String, nullable=False, unique=True)
    name = Column(String, nullable=False)
    role = Column(String, nullable=False, server_default="patient")
    phone = Column(String)
    specialization = Column(String)
    license_number = Column(String)
    date_of_birth = Column(Date)
    address = Column(String)
    blood_group = Column(String)
    emergency_contact = Column(JSON)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        TIMESTAMP(timezone=False), nullable=False, server_default=func.now()
    )


class Appointment(Base):
    __tablename__ = "appointments"
    id = Column(Uuid, primary_key=True, nullable=False, default=uuid.uuid4)
    doctor_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    patient_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    status = Column(String, nullable=False, server_default="pending")
    appointment_date = Column(TIMESTAMP(timezone=False), nullable=False)
    reason = Column(String)
    created_at = Column(
        TIMESTAMP(timezone=False), nullable=False, server_default=func.now()
    )
    doctor = relationship("User", foreign_keys=[doctor_id])
    patient = relationship("User", foreign_keys=[patient_id])


class AIAnalysis(Base):
    __tablename__ = "ai_analyses"
    id = Column(Uuid, primary_key=True, nullable=False, default=uuid.uuid4)
    doctor_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    patient_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    ai_response = Column(JSON)
    accuracy = Column(Float)
    created_at = Column(
        TIMESTAMP(timezone=False), nullable=False, server_default=func.now()
    )


class Report(Base):
    __tablename__ = "reports"
    id = Column(Uuid, primary_key=True, nullable=False, default=uuid.uuid4)
    patient_id = Column(Uuid, ForeignKey("users.id"), nullable=False)
    title = Column(String, nullable=False)
    created_at = Column(
        TIMESTAMP(timezone=False), nullable=False, server_default=func.now()
    )

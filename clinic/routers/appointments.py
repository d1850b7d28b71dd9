import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import UUID4

from .. import oauth2
from ..config import settings
from ..dependencies import get_collections, get_stats_cache
from ..exceptions import (
    InsufficientPermissionsHTTPException,
    ResourceNotFoundHTTPException,
)
from ..schemas.appointment import (
    AppointmentRecord,
    AppointmentStatus,
    CreateAppointment,
    ReturnAppointment,
    UpdateAppointmentStatus,
)
from ..schemas.oauth2 import Identity
from ..schemas.user import Role
from ..stats_cache import StatsCache
from ..stores.base import Collections
from ..utils import to_naive_local

router = APIRouter(prefix=settings.BASE_URL + "/appointments", tags=["Appointments"])


async def ensure_user_with_role(collections: Collections, user_id: UUID4, role: Role):
    user = await collections.users.find_one(user_id)

    if not user or user.role != role:
        raise ResourceNotFoundHTTPException(
            detail=f"{role.value.capitalize()} with id of {user_id} was not found"
        )

    return user


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ReturnAppointment)
async def create_appointment(
    appointment: CreateAppointment,
    collections: Collections = Depends(get_collections),
    stats_cache: StatsCache = Depends(get_stats_cache),
    identity: Identity = Depends(oauth2.get_identity),
):
    match identity.role:
        case Role.patient:
            patient_id = identity.id
        case Role.admin:
            if not appointment.patient_id:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="patient_id is required when booking on behalf of a patient",
                )
            patient_id = appointment.patient_id
        case _:
            raise InsufficientPermissionsHTTPException()

    appointment_date = to_naive_local(appointment.appointment_date)

    if appointment_date < datetime.datetime.now():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="appointment date must not be in the past",
        )

    await ensure_user_with_role(collections, appointment.doctor_id, Role.doctor)
    await ensure_user_with_role(collections, patient_id, Role.patient)

    new_appointment = await collections.appointments.insert_one(
        AppointmentRecord(
            doctor_id=appointment.doctor_id,
            patient_id=patient_id,
            appointment_date=appointment_date,
            reason=appointment.reason,
        )
    )

    stats_cache.invalidate()

    return new_appointment


@router.get("/mine", response_model=list[ReturnAppointment])
async def get_your_appointments(
    collections: Collections = Depends(get_collections),
    identity: Identity = Depends(oauth2.get_identity),
):
    match identity.role:
        case Role.doctor:
            query = {"doctor_id": identity.id}
        case Role.patient:
            query = {"patient_id": identity.id}
        case Role.admin:
            query = {}
        case _:
            return []

    appointments = await collections.appointments.find(query)

    return sorted(appointments, key=lambda appointment: appointment.appointment_date)


@router.patch("/{appointment_id}/status", response_model=ReturnAppointment)
async def update_appointment_status(
    appointment_id: UUID4,
    new_status: UpdateAppointmentStatus,
    collections: Collections = Depends(get_collections),
    stats_cache: StatsCache = Depends(get_stats_cache),
    identity: Identity = Depends(oauth2.get_identity),
):
    appointment = await collections.appointments.find_one(appointment_id)

    if not appointment:
        raise ResourceNotFoundHTTPException(detail="Appointment not found")

    is_own_doctor = identity.role == Role.doctor and appointment.doctor_id == identity.id
    is_own_cancellation = (
        identity.role == Role.patient
        and appointment.patient_id == identity.id
        and new_status.status == AppointmentStatus.cancelled
    )

    if not (identity.role == Role.admin or is_own_doctor or is_own_cancellation):
        raise InsufficientPermissionsHTTPException()

    appointment = await collections.appointments.update_one(
        appointment_id, {"status": new_status.status.value}
    )

    stats_cache.invalidate()

    return appointment


@router.delete("/{appointment_id}")
async def delete_appointment(
    appointment_id: UUID4,
    collections: Collections = Depends(get_collections),
    stats_cache: StatsCache = Depends(get_stats_cache),
    identity: Identity = Depends(oauth2.get_identity),
):
    appointment = await collections.appointments.find_one(appointment_id)

    if not appointment:
        raise ResourceNotFoundHTTPException(detail="Appointment not found")

    if identity.role != Role.admin and appointment.patient_id != identity.id:
        raise InsufficientPermissionsHTTPException()

    await collections.appointments.delete_one(appointment_id)

    stats_cache.invalidate()

    return {"success": True, "message": "Appointment deleted"}

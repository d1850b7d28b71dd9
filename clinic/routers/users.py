from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.exceptions import RequestValidationError
from pydantic import UUID4, ValidationError

from .. import oauth2
from ..config import settings
from ..dependencies import get_collections, get_stats_aggregator, get_stats_cache
from ..exceptions import (
    DataIntegrityError,
    InvalidUpdatesHTTPException,
    ResourceNotFoundHTTPException,
    SelfDeletionHTTPException,
)
from ..loggers import app_logger
from ..schemas.oauth2 import Identity
from ..schemas.stats import ReturnDashboardStats, ReturnHealthTrends
from ..schemas.user import (
    CreateUser,
    ReturnSingleUser,
    ReturnUsers,
    Role,
    UpdateUser,
    UserRecord,
)
from ..stats_aggregator import StatsAggregator
from ..stats_cache import StatsCache
from ..stores.base import Collections

router = APIRouter(prefix=settings.BASE_URL + "/users", tags=["Users"])

ALLOWED_UPDATES = set(UpdateUser.model_fields)


@router.get("/dashboard-stats", response_model=ReturnDashboardStats)
async def get_dashboard_stats(
    identity: Identity = Depends(oauth2.get_identity),
    aggregator: StatsAggregator = Depends(get_stats_aggregator),
):
    stats = await aggregator.compute_stats(identity)

    return {"success": True, "stats": stats}


@router.get("/health-trends", response_model=ReturnHealthTrends)
async def get_health_trends(
    identity: Identity = Depends(oauth2.get_identity),
    aggregator: StatsAggregator = Depends(get_stats_aggregator),
):
    trends = await aggregator.compute_health_trends(identity)

    return {"success": True, "trends": trends}


@router.post("", status_code=status.HTTP_201_CREATED, response_model=ReturnSingleUser)
async def create_user(
    user: CreateUser,
    collections: Collections = Depends(get_collections),
    stats_cache: StatsCache = Depends(get_stats_cache),
    _=Depends(oauth2.get_admin),
):
    user.name = user.name.strip()

    if await collections.users.find({"email": user.email}):
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"user with an email address of {user.email} already exists",
        )

    try:
        new_user = await collections.users.insert_one(
            UserRecord(**user.model_dump())
        )
    except DataIntegrityError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"user with an email address of {user.email} already exists",
        )

    stats_cache.invalidate()
    app_logger.info(f"User {new_user.id} created with role {new_user.role}")

    return {"success": True, "user": new_user}


@router.get("", response_model=ReturnUsers)
async def get_users(
    role: Role | None = None,
    search: str | None = None,
    collections: Collections = Depends(get_collections),
    _=Depends(oauth2.get_admin),
):
    query = {}

    if role:
        query["role"] = role.value

    if search:
        query["$or"] = [
            {"name": {"$icontains": search}},
            {"email": {"$icontains": search}},
        ]

    users = await collections.users.find(query)
    users = sorted(users, key=lambda user: user.created_at, reverse=True)
    users = users[: settings.MAX_LISTED_USERS]

    return {"success": True, "count": len(users), "users": users}


@router.get("/{user_id}", response_model=ReturnSingleUser)
async def get_user_by_id(
    user_id: UUID4,
    collections: Collections = Depends(get_collections),
    _=Depends(oauth2.get_admin),
):
    user = await collections.users.find_one(user_id)

    if not user:
        raise ResourceNotFoundHTTPException(detail="User not found")

    return {"success": True, "user": user}


@router.put("/{user_id}", response_model=ReturnSingleUser)
async def update_user(
    user_id: UUID4,
    updates: dict = Body(...),
    collections: Collections = Depends(get_collections),
    stats_cache: StatsCache = Depends(get_stats_cache),
    _=Depends(oauth2.get_admin),
):
    invalid_fields = set(updates) - ALLOWED_UPDATES

    if invalid_fields:
        raise InvalidUpdatesHTTPException(list(invalid_fields))

    try:
        changes = UpdateUser(**updates).model_dump(
            exclude_unset=True, exclude_none=True
        )
    except ValidationError as e:
        raise RequestValidationError(
            e.errors(include_url=False, include_context=False)
        )

    user = await collections.users.update_one(user_id, changes)

    if not user:
        raise ResourceNotFoundHTTPException(detail="User not found")

    stats_cache.invalidate()

    return {"success": True, "user": user}


@router.delete("/{user_id}")
async def delete_user(
    user_id: UUID4,
    collections: Collections = Depends(get_collections),
    stats_cache: StatsCache = Depends(get_stats_cache),
    admin: Identity = Depends(oauth2.get_admin),
):
    if user_id == admin.id:
        raise SelfDeletionHTTPException()

    try:
        deleted = await collections.users.delete_one(user_id)
    except DataIntegrityError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="User is still referenced by appointments, analyses or reports",
        )

    if not deleted:
        raise ResourceNotFoundHTTPException(detail="User not found")

    stats_cache.invalidate()
    app_logger.info(f"User {user_id} deleted by admin {admin.id}")

    return {"success": True, "message": "User deleted"}

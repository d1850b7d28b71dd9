import abc
import datetime
from typing import Any, Callable

from .loggers import app_logger
from .schemas.appointment import AppointmentStatus
from .schemas.oauth2 import Identity
from .schemas.user import Role
from .stats_cache import StatsCache
from .stores.base import Collections, ExactCountStore, Store
from .stores.filters import matches
from .utils import start_of_day

UPCOMING_STATUSES = [AppointmentStatus.pending.value, AppointmentStatus.confirmed.value]


class CountingStrategy(abc.ABC):
    """Computes several counts over one collection in a single request.

    ``scope`` narrows the collection (e.g. to one doctor), ``counts`` maps a
    metric name to the extra filter it applies on top of the scope and
    ``distinct`` maps a metric name to a field whose unique values are counted.
    """

    def __init__(self, store: Store) -> None:
        self._store = store

    @abc.abstractmethod
    async def tally(
        self,
        scope: dict,
        counts: dict[str, dict],
        distinct: dict[str, str] | None = None,
    ) -> dict[str, int]:
        ...


class ExactCounting(CountingStrategy):
    async def tally(self, scope, counts, distinct=None):
        result = {}

        for name, condition in counts.items():
            result[name] = await self._store.count_documents({**scope, **condition})

        for name, field in (distinct or {}).items():
            result[name] = len(await self._store.distinct(field, scope))

        return result


class EnumeratingCounting(CountingStrategy):
    async def tally(self, scope, counts, distinct=None):
        records = await self._store.find(scope)

        result = {
            name: sum(1 for record in records if matches(record, condition))
            for name, condition in counts.items()
        }

        for name, field in (distinct or {}).items():
            result[name] = len({getattr(record, field) for record in records})

        return result


def counting_strategy_for(store: Store) -> CountingStrategy:
    if isinstance(store, ExactCountStore):
        return ExactCounting(store)

    return EnumeratingCounting(store)


class StatsAggregator:
    def __init__(
        self,
        collections: Collections,
        cache: StatsCache,
        clock: Callable[[], datetime.datetime] = datetime.datetime.now,
    ) -> None:
        self._analyses = collections.analyses
        self._cache = cache
        self._clock = clock

        self._users_counter = counting_strategy_for(collections.users)
        self._appointments_counter = counting_strategy_for(collections.appointments)
        self._analyses_counter = counting_strategy_for(collections.analyses)
        self._reports_counter = counting_strategy_for(collections.reports)

    async def compute_stats(self, identity: Identity) -> dict[str, int]:
        match identity.role:
            case Role.admin:
                return await self._admin_stats()
            case Role.doctor:
                return await self._doctor_stats(identity.id)
            case Role.patient:
                return await self._patient_stats(identity.id)
            case _:
                return {}

    async def _admin_stats(self) -> dict[str, int]:
        cached = self._cache.get()

        if cached is not None:
            app_logger.debug("Serving admin dashboard stats from cache")
            return cached

        users = await self._users_counter.tally(
            {},
            {
                "total_users": {},
                "total_patients": {"role": Role.patient.value},
                "total_doctors": {"role": Role.doctor.value},
            },
        )
        appointments = await self._appointments_counter.tally(
            {},
            {
                "total_appointments": {},
                "pending_appointments": {"status": AppointmentStatus.pending.value},
            },
        )
        analyses = await self._analyses_counter.tally({}, {"total_analyses": {}})

        stats = {
            "total_users": users["total_users"],
            "total_patients": users["total_patients"],
            "total_doctors": users["total_doctors"],
            "total_appointments": appointments["total_appointments"],
            "total_analyses": analyses["total_analyses"],
            "pending_appointments": appointments["pending_appointments"],
        }

        self._cache.put(stats)
        app_logger.debug("Admin dashboard stats recomputed and cached")

        return stats

    async def _doctor_stats(self, doctor_id) -> dict[str, int]:
        appointments = await self._appointments_counter.tally(
            {"doctor_id": doctor_id},
            {
                "my_appointments": {},
                "pending_appointments": {"status": AppointmentStatus.pending.value},
                "completed_appointments": {
                    "status": AppointmentStatus.completed.value
                },
            },
            distinct={"total_patients": "patient_id"},
        )
        analyses = await self._analyses_counter.tally(
            {"doctor_id": doctor_id}, {"my_analyses": {}}
        )

        return {
            "my_appointments": appointments["my_appointments"],
            "pending_appointments": appointments["pending_appointments"],
            "completed_appointments": appointments["completed_appointments"],
            "my_analyses": analyses["my_analyses"],
            "total_patients": appointments["total_patients"],
        }

    async def _patient_stats(self, patient_id) -> dict[str, int]:
        start_of_today = start_of_day(self._clock())

        appointments = await self._appointments_counter.tally(
            {"patient_id": patient_id},
            {
                "my_appointments": {},
                "upcoming_appointments": {
                    "status": {"$in": UPCOMING_STATUSES},
                    "appointment_date": {"$gte": start_of_today},
                },
            },
        )
        reports = await self._reports_counter.tally(
            {"patient_id": patient_id}, {"my_reports": {}}
        )
        analyses = await self._analyses_counter.tally(
            {"patient_id": patient_id}, {"my_analyses": {}}
        )

        return {
            "my_appointments": appointments["my_appointments"],
            "upcoming_appointments": appointments["upcoming_appointments"],
            "my_reports": reports["my_reports"],
            "my_analyses": analyses["my_analyses"],
        }

    async def compute_health_trends(self, identity: Identity) -> list[dict[str, Any]]:
        match identity.role:
            case Role.admin:
                analyses = await self._analyses.find({})
            case _:
                analyses = await self._analyses.find({"patient_id": identity.id})

        analyses = sorted(analyses, key=lambda analysis: analysis.created_at)

        trends = []
        for analysis in analyses:
            ai_response = analysis.ai_response or {}
            diagnosis = ai_response.get("possible_diagnosis") or []
            trends.append(
                {
                    "date": analysis.created_at,
                    "severity": ai_response.get("severity") or "low",
                    "confidence": ai_response.get("confidence") or 0,
                    "accuracy": analysis.accuracy or None,
                    "diagnosis_count": len(diagnosis),
                }
            )

        return trends

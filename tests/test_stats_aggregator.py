import datetime
import uuid
from datetime import timedelta

import pytest

from clinic.exceptions import DataAccessError
from clinic.schemas.analysis import AnalysisRecord
from clinic.schemas.oauth2 import Identity
from clinic.stats_aggregator import (
    EnumeratingCounting,
    ExactCounting,
    StatsAggregator,
    counting_strategy_for,
)
from clinic.stores.base import Collections
from factories import (
    FailingMemoryCollection,
    NOW,
    identity_of,
    make_analysis,
    make_appointment,
    make_user,
    seed,
)

pytestmark = pytest.mark.anyio


def find_calls(collections: Collections) -> dict:
    return {
        "users": collections.users.calls["find"],
        "appointments": collections.appointments.calls["find"],
        "analyses": collections.analyses.calls["find"],
        "reports": collections.reports.calls["find"],
    }


@pytest.fixture
def aggregator(memory_collections, stats_cache, clock):
    return StatsAggregator(memory_collections, stats_cache, clock=clock)


def test_counting_strategy_follows_store_capabilities(
    memory_collections, sql_collections
):
    assert isinstance(
        counting_strategy_for(memory_collections.users), EnumeratingCounting
    )
    assert isinstance(counting_strategy_for(sql_collections.users), ExactCounting)


async def test_admin_stats(aggregator, memory_collections):
    users = await seed(memory_collections)

    stats = await aggregator.compute_stats(identity_of(users["admin"]))

    assert stats == {
        "total_users": 6,
        "total_patients": 3,
        "total_doctors": 2,
        "total_appointments": 5,
        "total_analyses": 3,
        "pending_appointments": 2,
    }


async def test_admin_stats_enumerate_each_collection_once(
    aggregator, memory_collections
):
    users = await seed(memory_collections)

    await aggregator.compute_stats(identity_of(users["admin"]))

    assert find_calls(memory_collections) == {
        "users": 1,
        "appointments": 1,
        "analyses": 1,
        "reports": 0,
    }


async def test_admin_stats_served_from_cache_within_ttl(
    aggregator, memory_collections, clock
):
    users = await seed(memory_collections)
    admin = identity_of(users["admin"])

    first = await aggregator.compute_stats(admin)
    clock.advance(timedelta(minutes=4))
    await memory_collections.users.insert_one(make_user(role="patient"))
    second = await aggregator.compute_stats(admin)

    assert second is first
    assert second["total_users"] == 6
    assert find_calls(memory_collections)["users"] == 1


async def test_admin_stats_cache_is_shared_between_admins(
    aggregator, memory_collections
):
    users = await seed(memory_collections)
    other_admin = Identity(id=uuid.uuid4(), role="admin")

    first = await aggregator.compute_stats(identity_of(users["admin"]))
    second = await aggregator.compute_stats(other_admin)

    assert second is first


async def test_admin_stats_recomputed_after_ttl(aggregator, memory_collections, clock):
    users = await seed(memory_collections)
    admin = identity_of(users["admin"])

    await aggregator.compute_stats(admin)
    await memory_collections.users.insert_one(make_user(role="patient"))
    clock.advance(timedelta(minutes=5))
    stats = await aggregator.compute_stats(admin)

    assert stats["total_users"] == 7
    assert stats["total_patients"] == 4
    assert find_calls(memory_collections)["users"] == 2


async def test_admin_stats_recomputed_after_invalidate(
    aggregator, memory_collections, stats_cache
):
    users = await seed(memory_collections)
    admin = identity_of(users["admin"])

    first = await aggregator.compute_stats(admin)
    stats_cache.invalidate()
    second = await aggregator.compute_stats(admin)

    assert second is not first
    assert second == first
    assert find_calls(memory_collections)["appointments"] == 2


async def test_failed_admin_stats_are_not_cached(memory_collections, stats_cache, clock):
    users = await seed(memory_collections)
    collections = Collections(
        users=memory_collections.users,
        appointments=memory_collections.appointments,
        analyses=FailingMemoryCollection(AnalysisRecord),
        reports=memory_collections.reports,
    )
    aggregator = StatsAggregator(collections, stats_cache, clock=clock)

    with pytest.raises(DataAccessError):
        await aggregator.compute_stats(identity_of(users["admin"]))

    assert stats_cache.get() is None
    assert stats_cache.timestamp is None


async def test_doctor_stats(aggregator, memory_collections, stats_cache):
    users = await seed(memory_collections)

    stats = await aggregator.compute_stats(identity_of(users["d1"]))

    assert stats == {
        "my_appointments": 3,
        "pending_appointments": 1,
        "completed_appointments": 1,
        "my_analyses": 2,
        "total_patients": 2,
    }
    assert stats_cache.get() is None
    assert find_calls(memory_collections) == {
        "users": 0,
        "appointments": 1,
        "analyses": 1,
        "reports": 0,
    }


async def test_doctor_total_patients_counts_distinct_patients(
    aggregator, memory_collections
):
    doctor, p1, p2 = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    for patient in (p1, p1, p2):
        await memory_collections.appointments.insert_one(
            make_appointment(doctor, patient)
        )

    stats = await aggregator.compute_stats(Identity(id=doctor, role="doctor"))

    assert stats["total_patients"] == 2
    assert stats["my_appointments"] == 3


async def test_patient_stats(aggregator, memory_collections):
    users = await seed(memory_collections)

    stats = await aggregator.compute_stats(identity_of(users["p1"]))

    assert stats == {
        "my_appointments": 3,
        "upcoming_appointments": 1,
        "my_reports": 2,
        "my_analyses": 2,
    }
    assert find_calls(memory_collections) == {
        "users": 0,
        "appointments": 1,
        "analyses": 1,
        "reports": 1,
    }


async def test_patient_upcoming_appointments_compare_by_day(
    aggregator, memory_collections
):
    doctor, patient = uuid.uuid4(), uuid.uuid4()
    for date, status in [
        (datetime.datetime(2024, 6, 10, 8, 0), "pending"),
        (datetime.datetime(2024, 6, 9, 23, 59), "pending"),
        (datetime.datetime(2024, 6, 11, 9, 0), "cancelled"),
        (datetime.datetime(2024, 6, 12, 9, 0), "confirmed"),
        (datetime.datetime(2024, 6, 12, 10, 0), "completed"),
    ]:
        await memory_collections.appointments.insert_one(
            make_appointment(doctor, patient, appointment_date=date, status=status)
        )

    stats = await aggregator.compute_stats(Identity(id=patient, role="patient"))

    assert stats["my_appointments"] == 5
    assert stats["upcoming_appointments"] == 2


async def test_unknown_role_yields_empty_stats(aggregator, memory_collections):
    await seed(memory_collections)

    stats = await aggregator.compute_stats(Identity(id=uuid.uuid4(), role="guest"))

    assert stats == {}
    assert sum(find_calls(memory_collections).values()) == 0


async def test_health_trends_are_sorted_oldest_first(aggregator, memory_collections):
    doctor, patient, other = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
    for days_ago, owner in [(1, patient), (5, other), (3, patient), (2, other)]:
        await memory_collections.analyses.insert_one(
            make_analysis(
                doctor,
                owner,
                created_at=NOW - timedelta(days=days_ago),
                ai_response={
                    "severity": "high",
                    "confidence": 87.5,
                    "possible_diagnosis": ["flu", "cold"],
                },
                accuracy=90.0,
            )
        )

    admin_trends = await aggregator.compute_health_trends(
        Identity(id=uuid.uuid4(), role="admin")
    )
    patient_trends = await aggregator.compute_health_trends(
        Identity(id=patient, role="patient")
    )

    assert [trend["date"] for trend in admin_trends] == [
        NOW - timedelta(days=days_ago) for days_ago in (5, 3, 2, 1)
    ]
    assert [trend["date"] for trend in patient_trends] == [
        NOW - timedelta(days=3),
        NOW - timedelta(days=1),
    ]
    assert patient_trends[0] == {
        "date": NOW - timedelta(days=3),
        "severity": "high",
        "confidence": 87.5,
        "accuracy": 90.0,
        "diagnosis_count": 2,
    }


async def test_health_trends_fill_defaults(aggregator, memory_collections):
    doctor, patient = uuid.uuid4(), uuid.uuid4()
    await memory_collections.analyses.insert_one(
        make_analysis(doctor, patient, created_at=NOW)
    )
    await memory_collections.analyses.insert_one(
        make_analysis(
            doctor,
            patient,
            created_at=NOW + timedelta(hours=1),
            ai_response={},
            accuracy=0.0,
        )
    )

    trends = await aggregator.compute_health_trends(
        Identity(id=patient, role="patient")
    )

    assert trends == [
        {
            "date": date,
            "severity": "low",
            "confidence": 0,
            "accuracy": None,
            "diagnosis_count": 0,
        }
        for date in (NOW, NOW + timedelta(hours=1))
    ]


async def test_doctor_health_trends_only_cover_analyses_about_them(
    aggregator, memory_collections
):
    doctor, patient = uuid.uuid4(), uuid.uuid4()
    await memory_collections.analyses.insert_one(
        make_analysis(doctor, patient, created_at=NOW)
    )
    await memory_collections.analyses.insert_one(
        make_analysis(uuid.uuid4(), doctor, created_at=NOW + timedelta(days=1))
    )

    trends = await aggregator.compute_health_trends(Identity(id=doctor, role="doctor"))

    assert [trend["date"] for trend in trends] == [NOW + timedelta(days=1)]

from typing import Type

from pydantic import BaseModel, UUID4

from ..schemas.analysis import AnalysisRecord
from ..schemas.appointment import AppointmentRecord
from ..schemas.report import ReportRecord
from ..schemas.user import UserRecord
from .base import Collections, EnumerateOnlyStore
from .filters import matches


class InMemoryCollection(EnumerateOnlyStore):
    def __init__(self, record_type: Type[BaseModel]) -> None:
        self._record_type = record_type
        self._records: dict[UUID4, BaseModel] = {}

    def __len__(self) -> int:
        return len(self._records)

    async def find(self, filter_: dict | None = None) -> list[BaseModel]:
        return [
            record.model_copy()
            for record in self._records.values()
            if matches(record, filter_)
        ]

    async def find_one(self, record_id: UUID4) -> BaseModel | None:
        record = self._records.get(record_id)
        return record.model_copy() if record else None

    async def insert_one(self, record: BaseModel) -> BaseModel:
        if not isinstance(record, self._record_type):
            record = self._record_type.model_validate(record)

        self._records[record.id] = record
        return record.model_copy()

    async def update_one(self, record_id: UUID4, changes: dict) -> BaseModel | None:
        record = self._records.get(record_id)

        if not record:
            return None

        updated = self._record_type.model_validate(
            {**record.model_dump(), **changes}
        )
        self._records[record_id] = updated
        return updated.model_copy()

    async def delete_one(self, record_id: UUID4) -> bool:
        return self._records.pop(record_id, None) is not None

    def clear(self) -> None:
        self._records.clear()


def create_memory_collections() -> Collections:
    return Collections(
        users=InMemoryCollection(UserRecord),
        appointments=InMemoryCollection(AppointmentRecord),
        analyses=InMemoryCollection(AnalysisRecord),
        reports=InMemoryCollection(ReportRecord),
    )

import abc
from dataclasses import dataclass
from typing import Any

from pydantic import UUID4


class Store(abc.ABC):
    """Data access capabilities every collection exposes."""

    @abc.abstractmethod
    async def find(self, filter_: dict | None = None) -> list[Any]:
        ...

    @abc.abstractmethod
    async def find_one(self, record_id: UUID4) -> Any | None:
        ...

    @abc.abstractmethod
    async def insert_one(self, record: Any) -> Any:
        ...

    @abc.abstractmethod
    async def update_one(self, record_id: UUID4, changes: dict) -> Any | None:
        ...

    @abc.abstractmethod
    async def delete_one(self, record_id: UUID4) -> bool:
        ...


class EnumerateOnlyStore(Store, abc.ABC):
    """A backend without server-side counting; metrics need full retrieval."""


class ExactCountStore(Store, abc.ABC):
    """A backend able to count and deduplicate on the server."""

    @abc.abstractmethod
    async def count_documents(self, filter_: dict | None = None) -> int:
        ...

    @abc.abstractmethod
    async def distinct(self, field: str, filter_: dict | None = None) -> list[Any]:
        ...


@dataclass
class Collections:
    users: Store
    appointments: Store
    analyses: Store
    reports: Store

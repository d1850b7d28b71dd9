from typing import Any, Callable

from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, UUID4
from sqlalchemy import and_, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from .. import models
from ..database import Base
from ..exceptions import DataAccessError, DataIntegrityError
from .base import Collections, ExactCountStore
from .filters import COMPARISON_OPERATORS


def escape_like(text) -> str:
    # wildcards in search text match literally
    return (
        str(text).replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    )


class SqlCollection(ExactCountStore):
    """Collection backed by a SQLAlchemy model.

    Session work is pushed to the threadpool so the event loop never blocks on
    the database driver. Engine failures surface as ``DataAccessError``.
    """

    def __init__(self, db: Session, model: type[Base]) -> None:
        self._db = db
        self._model = model

    def _column(self, field: str):
        try:
            return getattr(self._model, field)
        except AttributeError:
            raise ValueError(
                f"{self._model.__tablename__} has no column named {field}"
            )

    def _criteria(self, filter_: dict | None) -> list:
        criteria = []

        for field, condition in (filter_ or {}).items():
            if field == "$or":
                criteria.append(
                    or_(*[and_(*self._criteria(nested)) for nested in condition])
                )
                continue

            column = self._column(field)

            if not isinstance(condition, dict):
                criteria.append(column == condition)
                continue

            for operator_name, expected in condition.items():
                if operator_name == "$in":
                    criteria.append(column.in_(expected))
                elif operator_name == "$icontains":
                    criteria.append(
                        column.ilike(f"%{escape_like(expected)}%", escape="\\")
                    )
                elif operator_name in COMPARISON_OPERATORS:
                    compare = COMPARISON_OPERATORS[operator_name]
                    criteria.append(compare(column, expected))
                else:
                    raise ValueError(f"Unsupported filter operator {operator_name}")

        return criteria

    async def _run(self, func: Callable, *args) -> Any:
        try:
            return await run_in_threadpool(func, *args)
        except IntegrityError as e:
            self._db.rollback()
            raise DataIntegrityError(str(e.orig)) from e
        except SQLAlchemyError as e:
            self._db.rollback()
            raise DataAccessError(str(e)) from e

    async def find(self, filter_: dict | None = None) -> list[Base]:
        query = self._db.query(self._model).filter(*self._criteria(filter_))
        return await self._run(query.all)

    async def find_one(self, record_id: UUID4) -> Base | None:
        return await self._run(self._db.get, self._model, record_id)

    async def count_documents(self, filter_: dict | None = None) -> int:
        query = self._db.query(self._model).filter(*self._criteria(filter_))
        return await self._run(query.count)

    async def distinct(self, field: str, filter_: dict | None = None) -> list[Any]:
        query = (
            self._db.query(self._column(field))
            .filter(*self._criteria(filter_))
            .distinct()
        )
        rows = await self._run(query.all)
        return [row[0] for row in rows]

    def _insert(self, record: BaseModel | dict) -> Base:
        if isinstance(record, BaseModel):
            record = record.model_dump()

        row = self._model(**record)
        self._db.add(row)
        self._db.commit()
        self._db.refresh(row)
        return row

    async def insert_one(self, record: BaseModel | dict) -> Base:
        return await self._run(self._insert, record)

    def _update(self, record_id: UUID4, changes: dict) -> Base | None:
        row = self._db.get(self._model, record_id)

        if not row:
            return None

        for field, value in changes.items():
            setattr(row, field, value)

        self._db.commit()
        self._db.refresh(row)
        return row

    async def update_one(self, record_id: UUID4, changes: dict) -> Base | None:
        return await self._run(self._update, record_id, changes)

    def _delete(self, record_id: UUID4) -> bool:
        row = self._db.get(self._model, record_id)

        if not row:
            return False

        self._db.delete(row)
        self._db.commit()
        return True

    async def delete_one(self, record_id: UUID4) -> bool:
        return await self._run(self._delete, record_id)


def create_sql_collections(db: Session) -> Collections:
    return Collections(
        users=SqlCollection(db, models.User),
        appointments=SqlCollection(db, models.Appointment),
        analyses=SqlCollection(db, models.AIAnalysis),
        reports=SqlCollection(db, models.Report),
    )

import asyncio

from clinic.config import settings
from clinic.database import create_tables, database_engine, sessionLocal
from clinic.dependencies import memory_collections
from clinic.loggers import init_app_logger
from clinic.oauth2 import create_access_token
from clinic.schemas.user import Role, UserRecord
from clinic.stores.base import Collections
from clinic.stores.sql import create_sql_collections


def init_tables() -> None:
    try:
        create_tables(database_engine)
    except Exception as e:
        init_app_logger.error(f"Creating tables failed with error {e}")
        raise


async def init_admin(collections: Collections) -> UserRecord:
    admins = await collections.users.find(
        {"email": settings.DEFAULT_ADMIN_EMAIL, "role": Role.admin.value}
    )

    if admins:
        init_app_logger.info("Default admin already exists")
        return admins[0]

    admin = await collections.users.insert_one(
        UserRecord(
            email=settings.DEFAULT_ADMIN_EMAIL,
            name=settings.DEFAULT_ADMIN_NAME,
            role=Role.admin,
        )
    )
    init_app_logger.info(f"Default admin {admin.id} created")

    return admin


def init_app() -> None:
    if settings.STORE_BACKEND == "database":
        init_tables()

        db = sessionLocal()
        try:
            admin = asyncio.run(init_admin(create_sql_collections(db)))
        finally:
            db.close()
    else:
        admin = asyncio.run(init_admin(memory_collections))

    init_app_logger.info(
        f"Default admin access token: {create_access_token(admin.id, Role.admin.value)}"
    )


if __name__ == "__main__":
    init_app()

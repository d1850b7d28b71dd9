from sqlalchemy import create_engine
from sqlalchemy.engine import URL, Engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import Settings, settings

STATEMENT_TIMEOUT_MS = 4000

Base = declarative_base()


def build_database_url(config: Settings = settings) -> str:
    if config.DATABASE_URL:
        return config.DATABASE_URL

    return URL.create(
        "postgresql",
        username=config.DATABASE_USERNAME,
        password=config.DATABASE_PASSWORD,
        host=config.DATABASE_HOSTNAME,
        port=int(config.DATABASE_PORT),
        database=config.DATABASE_NAME,
    ).render_as_string(hide_password=False)


def get_db_engine(database_url: str, **kwargs) -> Engine:
    """Engine with per-dialect connection defaults.

    PostgreSQL connections get a statement timeout. SQLite connections are
    shared with threadpool workers, and an in-memory SQLite database is kept
    on a single connection so every session sees the same tables.
    """
    if database_url.startswith("postgresql"):
        kwargs.setdefault(
            "connect_args",
            {"options": f"-c statement_timeout={STATEMENT_TIMEOUT_MS}"},
        )
    elif database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})

        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs.setdefault("poolclass", StaticPool)

    return create_engine(database_url, pool_pre_ping=True, **kwargs)


def get_session(db_engine: Engine) -> sessionmaker:
    return sessionmaker(autoflush=False, bind=db_engine)


def create_tables(db_engine: Engine) -> None:
    Base.metadata.create_all(bind=db_engine)


def drop_tables(db_engine: Engine) -> None:
    Base.metadata.drop_all(bind=db_engine)


database_engine = get_db_engine(build_database_url())
sessionLocal = get_session(database_engine)

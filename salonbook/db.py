# salonbook/db.py

import logging

from sqlmodel import SQLModel, Session, create_engine

from .config import get_settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str, echo: bool = False):
    connect_args = {}
    if database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # required for SQLite + FastAPI
    return create_engine(database_url, echo=echo, connect_args=connect_args)


settings = get_settings()

# Engine = connection to the database
engine = build_engine(settings.database_url, echo=settings.database_echo)


def create_db_and_tables(bind=None) -> None:
    # models must be imported so their tables are registered on the metadata
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(bind or engine)
    logger.info("Database tables created")


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session

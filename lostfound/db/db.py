import logging

from fastapi import Depends
from sqlmodel import Session, SQLModel, create_engine

from lostfound.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()

connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(
    settings.database_url,
    connect_args=connect_args,

    pool_pre_ping=True,

    echo=settings.sql_echo  # Set SQL_ECHO=true for SQL query logging
)


def create_db_and_tables():
    # Table classes must be imported so they register on the metadata
    from lostfound.models import claim, comment, item, message, notification, profile, user  # noqa: F401

    SQLModel.metadata.create_all(engine)
    logger.info("Database tables ready")


def get_engine():
    return engine


def get_session(db_engine=Depends(get_engine)):
    with Session(db_engine) as session:
        yield session

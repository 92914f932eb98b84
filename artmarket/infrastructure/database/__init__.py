"""Database infrastructure: engine, ORM models, repositories, Unit of Work."""

from .config import close_database, create_engine, get_engine, get_session_factory, init_database
from .unit_of_work import UnitOfWork, create_uow

__all__ = [
    "UnitOfWork",
    "close_database",
    "create_engine",
    "create_uow",
    "get_engine",
    "get_session_factory",
    "init_database",
]

"""Database composition root: declarative base, engine, and the transaction boundary.

Every command handler opens exactly one transaction through ``Database.transaction``
or ``Database.run_in_transaction``. The transaction is the only coordination point
between concurrent requests; nothing in-process is shared between orders.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from typing import Any, TypeVar

import structlog
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

logger = structlog.get_logger(__name__)

T = TypeVar("T")


class Base(DeclarativeBase):
    pass


def _create_sqlite_engine(database_uri: str, echo: bool, busy_timeout: int) -> Engine:
    url = make_url(database_uri)
    in_memory = url.database in (None, "", ":memory:")

    kwargs: dict[str, Any] = {
        "echo": echo,
        "connect_args": {"check_same_thread": False, "timeout": busy_timeout},
    }
    if in_memory:
        kwargs["poolclass"] = StaticPool

    engine = create_engine(database_uri, **kwargs)

    # Every transaction takes the write lock at BEGIN; contenders wait out busy_timeout.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):  # noqa: ARG001
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")

    return engine


def create_db_engine(database_uri: str, echo: bool = False, busy_timeout: int = 30) -> Engine:
    if make_url(database_uri).get_backend_name() == "sqlite":
        return _create_sqlite_engine(database_uri, echo, busy_timeout)
    return create_engine(database_uri, echo=echo, pool_pre_ping=True)


class Database:
    """Owns the engine and session factory for one process."""

    def __init__(
        self,
        database_uri: str,
        echo: bool = False,
        busy_timeout: int = 30,
        retries: int = 1,
    ):
        self.database_uri = database_uri
        self.retries = retries
        self.engine = create_db_engine(database_uri, echo=echo, busy_timeout=busy_timeout)
        self.session_factory = sessionmaker(self.engine, expire_on_commit=False)

    @classmethod
    def from_config(cls, config: dict) -> "Database":
        db_conf = config["databases"]["default"]
        return cls(
            database_uri=db_conf["database_uri"],
            echo=db_conf.get("echo", False),
            busy_timeout=db_conf.get("busy_timeout", 30),
            retries=config.get("ordering", {}).get("infrastructure_retries", 1),
        )

    def session(self) -> Session:
        return self.session_factory()

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """Yield a session inside a transaction; commit on success, roll back on error."""
        with self.session_factory() as session:
            with session.begin():
                yield session

    def run_in_transaction(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run ``fn(session, *args, **kwargs)`` in one transaction.

        Infrastructure failures (lock timeouts, deadlocks, dropped connections) are
        retried with identical input up to ``self.retries`` more times. Nothing has
        been applied when such a failure escapes the transaction, so the retry is
        safe. Domain errors propagate immediately.
        """
        attempts = self.retries + 1
        for attempt in range(1, attempts + 1):
            try:
                with self.transaction() as session:
                    return fn(session, *args, **kwargs)
            except OperationalError as exc:
                if attempt >= attempts:
                    logger.error(
                        "Transaction failed after retries",
                        attempts=attempt,
                        error=str(exc.orig),
                    )
                    raise
                logger.warning(
                    "Transaction failed, retrying",
                    attempt=attempt,
                    error=str(exc.orig),
                )
        raise AssertionError("unreachable")

    def dispose(self) -> None:
        self.engine.dispose()


def register_models() -> None:
    """Import every mapped module so ``Base.metadata`` knows all tables."""
    import catalog.category.category  # noqa: F401
    import catalog.product.product  # noqa: F401
    import identity.customer.addresses  # noqa: F401
    import identity.customer.customer  # noqa: F401
    import ordering.order.order  # noqa: F401


def setup_db(database: Database) -> None:
    """Create database schema."""
    register_models()
    Base.metadata.create_all(database.engine)


def drop_db(database: Database) -> None:
    """Drop database schema."""
    register_models()
    Base.metadata.drop_all(database.engine)

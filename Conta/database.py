# Conta/database.py
import logging
from contextlib import contextmanager
from typing import Iterator, Optional

from fastapi import Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

logger = logging.getLogger(__name__)


class StoreUnavailable(Exception):
    """The relational store is not configured or did not answer."""

    def __init__(self, action: str):
        super().__init__(f"store unavailable while trying to {action}")
        self.action = action


class Store:
    """
    One handle per process. Built by the app factory, kept on
    ``app.state.store`` and handed to every access-layer function.
    """

    def __init__(self, url: Optional[str]):
        self.url = url
        self.engine = None
        if not url:
            logger.warning("DATABASE_URL not set, store will report unavailable")
            return
        if url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            if url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
            self.engine = create_engine(url, echo=False, **kwargs)
        else:
            self.engine = create_engine(url, echo=False, pool_pre_ping=True)

    @property
    def configured(self) -> bool:
        return self.engine is not None

    def init_schema(self) -> None:
        if self.engine is None:
            raise StoreUnavailable("create the schema")
        try:
            SQLModel.metadata.create_all(self.engine)
        except SQLAlchemyError as exc:
            raise StoreUnavailable("create the schema") from exc

    @contextmanager
    def session(self, action: str) -> Iterator[Session]:
        if self.engine is None:
            raise StoreUnavailable(action)
        try:
            with Session(self.engine) as session:
                yield session
        except SQLAlchemyError as exc:
            raise StoreUnavailable(action) from exc

    def dispose(self) -> None:
        if self.engine is not None:
            self.engine.dispose()


def get_store(request: Request) -> Store:
    return request.app.state.store

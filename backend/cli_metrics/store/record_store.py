"""Durable storage for log items reported by the CLI tool.

All rows live in the single ``logs`` table of a SQLite file. Writes are
Core insert statements run on a session so the affected-row count
reported by SQLite can be checked; reads go through the ORM.

Usage:
    init = init_store('/var/lib/sqlite3/metrics.db')
    if not init.ok:
        raise SystemExit(init.error)
    count, item_id = init.store.insert(LogItem(result_code=0, info='start'))
"""

import logging
import os
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Iterator

from sqlalchemy import create_engine, delete, select, text
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from cli_metrics.core.database import Base
from cli_metrics.core.errors import RecordNotFound, StoreFailure
from cli_metrics.models.log_item import LogItem

logger = logging.getLogger(__name__)

MEMORY = ':memory:'

_TABLE = LogItem.__table__
_COLUMNS = {column.name: column for column in _TABLE.columns}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RecordStore:
    """Create, upsert, read and delete log items.

    One instance is shared by every request. SQLite serialises writers,
    so no locking happens here.
    """

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._Session = sessionmaker(
            bind=engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
            future=True,
        )

    @classmethod
    def open(cls, location: str, echo: bool = False) -> 'RecordStore':
        if location == MEMORY:
            engine = create_engine(
                'sqlite+pysqlite:///:memory:',
                echo=echo,
                connect_args={'check_same_thread': False},
                poolclass=StaticPool,
            )
        else:
            engine = create_engine(
                f'sqlite+pysqlite:///{location}',
                echo=echo,
                connect_args={'check_same_thread': False},
            )
        return cls(engine)

    @property
    def engine(self) -> Engine:
        return self._engine

    def create_schema(self) -> None:
        Base.metadata.create_all(self._engine)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        session = self._Session()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def _write(self, session: Session, item: LogItem) -> tuple[int, int]:
        values = {
            _COLUMNS['clientTimestamp']: item.client_timestamp or 0,
            _COLUMNS['resultCode']: item.result_code,
            _COLUMNS['machineId']: item.machine_id or '',
            _COLUMNS['info']: item.info or '',
            _COLUMNS['insertedDatetime']: _utcnow(),
        }
        if item.id:
            stmt = (
                sqlite_insert(_TABLE)
                .values({_COLUMNS['ID']: item.id, **values})
                .on_conflict_do_update(index_elements=[_COLUMNS['ID']], set_=values)
            )
        else:
            stmt = sqlite_insert(_TABLE).values(values)

        result = session.execute(stmt)
        if item.id:
            item_id = item.id
            logger.debug('Upserted log item id=%d', item_id)
        else:
            item_id = result.inserted_primary_key[0]
        return result.rowcount, item_id

    def insert(self, item: LogItem) -> tuple[int, int]:
        """Write ``item`` and return ``(rows_affected, id)``.

        An id of 0 (or None) appends a row with a fresh id. Any other id
        replaces every column of the existing row with that id, or inserts
        it when absent. Fields left unset on ``item`` are written as
        empty values; nothing is merged from the old row.
        """
        with self.session_scope() as session:
            return self._write(session, item)

    def store(self, item: LogItem) -> LogItem:
        """Insert or upsert ``item`` and return the row as written.

        The write and the read-back share one transaction.
        """
        with self.session_scope() as session:
            count, item_id = self._write(session, item)
            if count != 1:
                raise StoreFailure(
                    f'expected 1 row affected writing log item, got {count}',
                    rows_affected=count,
                )
            written = session.get(LogItem, item_id)
            if written is None:
                raise StoreFailure(f'log item {item_id} missing right after write')
            return written

    def get(self, item_id: int) -> LogItem:
        with self.session_scope() as session:
            item = session.get(LogItem, item_id)
            if item is None:
                raise RecordNotFound(item_id)
            return item

    def list_all(self) -> list[LogItem]:
        # Unbounded: the caller always receives the whole table.
        stmt = select(LogItem).order_by(LogItem.inserted_at, LogItem.id)
        with self.session_scope() as session:
            return list(session.scalars(stmt).all())

    def delete(self, item_id: int) -> int:
        logger.info('Deleting log item id=%d', item_id)
        with self._engine.begin() as conn:
            result = conn.execute(delete(_TABLE).where(_COLUMNS['ID'] == item_id))
            return result.rowcount

    def ping(self) -> bool:
        try:
            with self._engine.connect() as conn:
                conn.execute(text('SELECT 1'))
            return True
        except SQLAlchemyError:
            return False

    def close(self) -> None:
        self._engine.dispose()


@dataclass(frozen=True)
class StoreInit:
    """Outcome of opening the backing store at startup.

    Exactly one of ``store`` and ``error`` is set.
    """

    location: str
    store: RecordStore | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.store is not None


def init_store(location: str) -> StoreInit:
    """Open or create the SQLite file at ``location`` and its ``logs`` table.

    Storage errors are returned in the result instead of raised; the
    process entry point decides to exit on them.
    """
    if location != MEMORY:
        if os.path.exists(location):
            logger.info('DB file %s already exists', location)
        else:
            logger.info('DB file %s does not exist so will be created', location)

    try:
        store = RecordStore.open(location)
        store.create_schema()
    except SQLAlchemyError as exc:
        logger.error('Cannot open log store at %s: %s', location, exc)
        return StoreInit(location=location, error=str(exc))
    return StoreInit(location=location, store=store)

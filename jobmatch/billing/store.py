"""
Record store used by the billing core.

The reconciliation engine only needs keyed single-row reads and writes, so it
talks to this narrow interface instead of the ORM. ``SqlRecordStore`` commits
every write on its own, relying on the database's per-row update atomicity.
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional

from sqlalchemy import inspect
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from jobmatch.errors import StoreUnavailable, ValidationError
from jobmatch.extensions import db
from jobmatch.models import Job, Payment, User

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


class RecordStore:
    """Interface consumed by the billing core."""

    def insert(self, table: str, row: Row) -> Row:
        raise NotImplementedError

    def update(self, table: str, patch: Row, match: Row) -> int:
        """Apply ``patch`` to rows matching ``match``; return the number updated."""
        raise NotImplementedError

    def select_one(self, table: str, match: Row) -> Optional[Row]:
        raise NotImplementedError

    def select_all(self, table: str, match: Row) -> List[Row]:
        raise NotImplementedError


def _plain(values: Row) -> Row:
    return {k: (v.value if isinstance(v, Enum) else v) for k, v in values.items()}


def _to_row(instance) -> Row:
    return {attr.key: getattr(instance, attr.key) for attr in inspect(instance).mapper.column_attrs}


class SqlRecordStore(RecordStore):
    """RecordStore backed by the Flask-SQLAlchemy session."""

    TABLES = {
        "payments": Payment,
        "users": User,
        "jobs": Job,
    }

    def __init__(self, session=None):
        self._session = session

    @property
    def session(self):
        return self._session or db.session

    def _model(self, table):
        try:
            return self.TABLES[table]
        except KeyError:
            raise ValueError(f"Unknown table: {table}")

    def insert(self, table, row):
        model = self._model(table)
        instance = model(**_plain(row))
        try:
            self.session.add(instance)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.warning(f"Insert into {table} rejected: {e.orig}")
            raise ValidationError(f"Record rejected by {table} constraints") from e
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Insert into {table} failed: {e}")
            raise StoreUnavailable() from e
        return _to_row(instance)

    def update(self, table, patch, match):
        model = self._model(table)
        try:
            count = (
                self.session.query(model)
                .filter_by(**_plain(match))
                .update(_plain(patch), synchronize_session=False)
            )
            self.session.commit()
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Update of {table} matching {match} failed: {e}")
            raise StoreUnavailable() from e
        return count

    def select_one(self, table, match):
        model = self._model(table)
        try:
            instance = (
                self.session.query(model)
                .populate_existing()
                .filter_by(**_plain(match))
                .first()
            )
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Select from {table} matching {match} failed: {e}")
            raise StoreUnavailable() from e
        return _to_row(instance) if instance is not None else None

    def select_all(self, table, match):
        model = self._model(table)
        try:
            instances = (
                self.session.query(model)
                .populate_existing()
                .filter_by(**_plain(match))
                .all()
            )
        except SQLAlchemyError as e:
            self.session.rollback()
            logger.error(f"Select from {table} matching {match} failed: {e}")
            raise StoreUnavailable() from e
        return [_to_row(instance) for instance in instances]

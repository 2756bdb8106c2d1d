# core/sa/repositories/base.py
import logging
from enum import Enum
from typing import Any, Dict, Sequence, Tuple, Type
from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from ..models import Base

logger = logging.getLogger(__name__)

class InsertResult(str, Enum):
    INSERTED = "inserted"
    ALREADY_EXISTED = "already_existed"

    @property
    def inserted(self) -> bool:
        return self is InsertResult.INSERTED


def _dialect_insert(dialect_name: str):
    """Return the dialect-specific insert() that supports ON CONFLICT, if any"""
    if dialect_name == 'sqlite':
        from sqlalchemy.dialects.sqlite import insert as sqlite_insert
        return sqlite_insert
    if dialect_name == 'postgresql':
        from sqlalchemy.dialects.postgresql import insert as pg_insert
        return pg_insert
    return None


def _row_exists(
    session: Session,
    model: Type[Base],
    values: Dict[str, Any],
    conflict_columns: Sequence[str]
) -> bool:
    filters = [getattr(model, column) == values.get(column) for column in conflict_columns]
    return session.execute(select(getattr(model, conflict_columns[0])).where(*filters)).first() is not None


def insert_or_ignore(
    session: Session,
    model: Type[Base],
    values: Dict[str, Any],
    conflict_columns: Sequence[str]
) -> InsertResult:
    """Insert a row unless one already exists for the given unique columns.

    Args:
        session: Active session; the insert joins its transaction
        model: Mapped class to insert into
        values: Column values for the new row
        conflict_columns: Columns of the unique constraint guarding duplicates

    Returns:
        InsertResult.INSERTED for a new row, InsertResult.ALREADY_EXISTED otherwise
    """
    table = model.__table__
    connection = session.connection()
    dialect_insert = _dialect_insert(connection.dialect.name)

    if dialect_insert is not None:
        stmt = dialect_insert(table).values(**values).on_conflict_do_nothing(
            index_elements=list(conflict_columns)
        )
        result = connection.execute(stmt)
        outcome = InsertResult.INSERTED if result.rowcount else InsertResult.ALREADY_EXISTED
    else:
        # Other engines: isolate the insert in a savepoint and read the conflict back
        try:
            with session.begin_nested():
                session.connection().execute(insert(table).values(**values))
            outcome = InsertResult.INSERTED
        except IntegrityError:
            # Only a duplicate key is soft; NOT NULL, FK and CHECK failures propagate
            if not _row_exists(session, model, values, conflict_columns):
                raise
            outcome = InsertResult.ALREADY_EXISTED

    if not outcome.inserted:
        key = {column: values.get(column) for column in conflict_columns}
        logger.warning(f"{table.name} row already exists for {key}; insert skipped")
    return outcome


def insert_or_get(
    session: Session,
    model: Type[Base],
    values: Dict[str, Any],
    conflict_columns: Sequence[str],
    key_column: str = 'id'
) -> Tuple[InsertResult, Any]:
    """Insert-or-get for rows keyed by a surrogate id but unique on another column.

    Args:
        session: Active session
        model: Mapped class to insert into
        values: Column values for the new row
        conflict_columns: Columns of the unique constraint guarding duplicates
        key_column: Column whose value is returned for the new or existing row

    Returns:
        Tuple of the InsertResult and the row key
    """
    outcome = insert_or_ignore(session, model, values, conflict_columns)
    filters = [getattr(model, column) == values[column] for column in conflict_columns]
    key = session.execute(
        select(getattr(model, key_column)).where(*filters)
    ).scalar_one()
    return outcome, key

"""SQLAlchemy table metadata for stored records."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    JSON,
    Column,
    DateTime,
    Dialect,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Table,
    TypeDecorator,
    UniqueConstraint,
)

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine

log = logging.getLogger(__name__)


class UTCDateTime(TypeDecorator[datetime]):
    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        if value.tzinfo is None:
            value = value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    def process_result_value(self, value: datetime | None, dialect: Dialect) -> datetime | None:
        _ = dialect
        if value is None:
            return None
        return value if value.tzinfo else value.replace(tzinfo=UTC)


def utc_now() -> datetime:
    return datetime.now(UTC)


metadata = MetaData(
    naming_convention={
        "ix": "ix_%(column_0_label)s",
        "uq": "uq_%(table_name)s_%(column_0_label)s",
        "ck": "ck_%(table_name)s_%(constraint_name)s",
        "fk": "fk_%(table_name)s_%(column_0_label)s_%(referred_table_name)s",
        "pk": "pk_%(table_name)s",
    }
)

stored_record_table = Table(
    "stored_record",
    metadata,
    Column("internal_id", Integer, primary_key=True, autoincrement=True),
    Column("kind", String(64), nullable=False),
    Column("external_id", String(255), nullable=False),
    Column("fields", JSON, nullable=False, default=dict),
    Column(
        "parent_internal_id",
        Integer,
        ForeignKey("stored_record.internal_id", ondelete="SET NULL"),
        nullable=True,
    ),
    Column("created_at", UTCDateTime(), nullable=False, default=utc_now),
    Column("updated_at", UTCDateTime(), nullable=False, default=utc_now, onupdate=utc_now),
    UniqueConstraint("kind", "external_id"),
    Index("ix_stored_record_parent", "parent_internal_id"),
)


def create_all_tables(engine: Engine) -> None:
    """Create missing tables; existing ones are left untouched."""

    log.debug("Ensuring record tables exist on %s", engine.url.render_as_string())
    metadata.create_all(engine, checkfirst=True)

from datetime import datetime, UTC
from sqlalchemy import DateTime, Integer, ForeignKey
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    """Naive UTC timestamp (stored without tzinfo so SQLite and PostgreSQL compare alike)."""
    return datetime.now(UTC).replace(tzinfo=None)


class Base(DeclarativeBase):
    pass


class TimestampMixin:
    """created_at / updated_at maintained by SQLAlchemy"""

    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )


class SoftDeleteMixin:
    """
    Deletion markers for records that are hidden instead of removed.

    A row with deleted_at set is excluded from every tenant-scoped read
    unless the caller explicitly asks for deleted records.
    """

    deleted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True, index=True)
    deleted_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )

    def mark_deleted(self, actor_id: int) -> None:
        self.deleted_at = utcnow()
        self.deleted_by = actor_id

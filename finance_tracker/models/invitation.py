"""Invitation model and its derived lifecycle state."""

from datetime import datetime
from enum import Enum as PyEnum
from sqlalchemy import String, Integer, ForeignKey, Enum, DateTime, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from finance_tracker.models.base import Base, TimestampMixin, utcnow
from finance_tracker.models.role import OrganizationRole

if TYPE_CHECKING:
    from finance_tracker.models.organization import Organization


class InvitationStatus(str, PyEnum):
    """
    Lifecycle state, derived from the timestamp columns (never stored).

    PENDING -> ACCEPTED | REVOKED. EXPIRED is how a pending row past its
    expiry reads; re-inviting the same email resets it to PENDING.
    """

    PENDING = "pending"
    EXPIRED = "expired"
    ACCEPTED = "accepted"
    REVOKED = "revoked"


class Invitation(Base, TimestampMixin):
    """
    Email-bound invitation to join an organization at a given role.

    Only the SHA-256 hash of the secret token is stored. One row per
    (organization_id, email); sending again overwrites that row.
    """

    __tablename__ = "invitations"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    role: Mapped[OrganizationRole] = mapped_column(
        Enum(OrganizationRole, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=OrganizationRole.MEMBER,
    )
    token_hash: Mapped[str] = mapped_column(String(64), unique=True, nullable=False, index=True)
    invited_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    sent_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    expires_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    accepted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    revoked_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    organization: Mapped["Organization"] = relationship(
        "Organization", back_populates="invitations"
    )

    __table_args__ = (
        UniqueConstraint("organization_id", "email", name="uq_invitation_organization_email"),
    )

    def status_at(self, now: datetime | None = None) -> InvitationStatus:
        """Classify the invitation at ``now`` (defaults to the current time)."""
        if self.accepted_at is not None:
            return InvitationStatus.ACCEPTED
        if self.revoked_at is not None:
            return InvitationStatus.REVOKED
        if self.expires_at <= (now or utcnow()):
            return InvitationStatus.EXPIRED
        return InvitationStatus.PENDING

    @property
    def status(self) -> InvitationStatus:
        return self.status_at()

    def __repr__(self) -> str:
        return (
            f"<Invitation(id={self.id}, organization_id={self.organization_id}, "
            f"email='{self.email}', status={self.status.value})>"
        )

"""Organization membership model linking users to organizations with roles."""

from datetime import datetime
from sqlalchemy import Integer, ForeignKey, Enum, UniqueConstraint, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING

from finance_tracker.models.base import Base, TimestampMixin, utcnow
from finance_tracker.models.role import OrganizationRole

if TYPE_CHECKING:
    from finance_tracker.models.user import User
    from finance_tracker.models.organization import Organization


class OrganizationMember(Base, TimestampMixin):
    """
    Join table linking users to organizations with roles.

    Rows are created either together with the organization (creator becomes
    OWNER) or when an invitation is accepted, in which case invited_by and
    invited_at are copied from the invitation.

    Constraints:
    - Unique(organization_id, user_id) - one membership per user per organization
    """

    __tablename__ = "organization_members"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    organization_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[OrganizationRole] = mapped_column(
        Enum(OrganizationRole, native_enum=False, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
        default=OrganizationRole.MEMBER,
    )
    invited_by: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    invited_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=utcnow)
    accepted_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    # Relationships
    organization: Mapped["Organization"] = relationship("Organization", back_populates="members")
    user: Mapped["User"] = relationship(
        "User", back_populates="memberships", foreign_keys=[user_id]
    )

    # Constraints
    __table_args__ = (
        UniqueConstraint("organization_id", "user_id", name="uq_organization_user"),
    )

    def __repr__(self) -> str:
        return (
            f"<OrganizationMember(organization_id={self.organization_id}, "
            f"user_id={self.user_id}, role={self.role.value})>"
        )

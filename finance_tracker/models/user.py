from sqlalchemy import String, Integer, Boolean
from sqlalchemy.orm import Mapped, mapped_column, relationship
from typing import TYPE_CHECKING
from finance_tracker.models.base import Base, TimestampMixin, SoftDeleteMixin

if TYPE_CHECKING:
    from finance_tracker.models.organization_member import OrganizationMember


class User(Base, TimestampMixin, SoftDeleteMixin):
    """
    Identity owned by the authentication service.

    This service only reads id and email. Rows are provisioned by the auth
    service; the JWT 'sub' claim carries users.id.
    """

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    email_verified: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)

    # Relationships
    memberships: Mapped[list["OrganizationMember"]] = relationship(
        "OrganizationMember",
        back_populates="user",
        foreign_keys="OrganizationMember.user_id",
        cascade="all, delete-orphan",
    )

    @property
    def display_name(self) -> str:
        full_name = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full_name or self.email

    def __repr__(self) -> str:
        return f"<User(id={self.id}, email='{self.email}')>"

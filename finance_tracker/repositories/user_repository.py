from sqlalchemy.orm import Session
from finance_tracker.models.user import User


class UserRepository:
    """Read-only access to users provisioned by the auth service"""

    def __init__(self, db: Session):
        self.db = db

    def get_by_id(self, user_id: int) -> User | None:
        """Get a user that has not been soft-deleted"""
        return (
            self.db.query(User)
            .filter(User.id == user_id, User.deleted_at.is_(None))
            .first()
        )

    def get_by_email(self, email: str) -> User | None:
        """
        Get a user by exact email match.

        Soft-deleted users are included: their address still occupies the
        unique email slot.
        """
        return self.db.query(User).filter(User.email == email).first()

from dataclasses import dataclass

from sqlalchemy.orm import Session

from app.models.user import User


@dataclass(frozen=True)
class UserContext:
    """The request's database session and authenticated user.

    Passed explicitly to every service function.
    """

    db: Session
    user: User

    @property
    def user_id(self) -> int:
        return self.user.id

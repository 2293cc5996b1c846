"""
Session context passed explicitly into the view builders.

The context is created at sign-in and cleared at sign-out by
streamlit_app/utils/session.py. View builders and write helpers only read it.
"""

from dataclasses import dataclass
from typing import Optional

ROLE_ADMIN = "admin"
ROLE_USER = "user"


@dataclass(frozen=True)
class SessionContext:
    """
    Who is looking at the page.

    Attributes:
        user_id: Signed-in user's id, None when logged out
        is_logged_in: Whether a user is signed in
        role: "user" or "admin" (None when logged out)
    """
    user_id: Optional[int] = None
    is_logged_in: bool = False
    role: Optional[str] = None

    @classmethod
    def anonymous(cls) -> "SessionContext":
        return cls()

    @classmethod
    def signed_in(cls, user_id: int, role: Optional[str] = None) -> "SessionContext":
        return cls(user_id=user_id, is_logged_in=True, role=role or ROLE_USER)

    @property
    def is_admin(self) -> bool:
        return self.is_logged_in and self.role == ROLE_ADMIN

    def can_write(self) -> bool:
        """Writes (favorites, ratings) need a signed-in user."""
        return self.is_logged_in and self.user_id is not None

    def owns_profile(self, user_id: int) -> bool:
        return self.can_write() and self.user_id == user_id

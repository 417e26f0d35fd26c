import logging
from typing import List

from tastehub.core.config import ADMIN_ROLE, FALLBACK_ADMIN_EMAIL
from tastehub.models.user import User

log = logging.getLogger(__name__)


class UserDirectory:
    """
    Resolves the admin pool from the users collection.

    Nothing is cached: every call re-reads the directory so role changes apply
    immediately. Any object exposing an async `admin_emails()` can stand in for it.
    """

    def __init__(self, fallback_email: str = FALLBACK_ADMIN_EMAIL, role: str = ADMIN_ROLE):
        self.fallback_email = fallback_email
        self.role = role

    async def admin_emails(self) -> List[str]:
        try:
            emails = await User.filter(role=self.role).order_by("created_at", "id").values_list("email", flat=True)
        except Exception as e:
            log.warning(f"Admin lookup failed, using fallback {self.fallback_email}: {e}")
            return [self.fallback_email]
        if not emails:
            log.warning(f"No users with role '{self.role}', using fallback {self.fallback_email}.")
            return [self.fallback_email]
        return list(emails)


def primary_admin(admin_emails: List[str]) -> str:
    """The admin that receives customer messages."""
    return admin_emails[0]


def get_admin_directory() -> UserDirectory:
    """FastAPI dependency; override it to plug in another directory."""
    return UserDirectory()

from dataclasses import dataclass
from typing import Optional

from certportal.db.models.user import UserRole


@dataclass
class PortalSession:
    """Auth context shared by the router and the API client."""
    email: Optional[str] = None
    role: Optional[UserRole] = None
    token: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token and self.role)

    def clear(self) -> None:
        self.email = None
        self.role = None
        self.token = None

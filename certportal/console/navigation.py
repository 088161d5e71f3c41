"""
Router/shell for the console.

Maps URL paths to role-gated pages. Every page goes through guard(), which
lets the session through, or sends it to /login (not signed in) or to its
own dashboard (wrong role).
"""
import logging
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional

from certportal.console.session import PortalSession
from certportal.db.models.user import UserRole

logger = logging.getLogger(__name__)

LOGIN_PATH = "/login"
NOT_FOUND_PAGE = "not_found"

DASHBOARDS: Dict[UserRole, str] = {
    UserRole.ADMIN: "/admin/dashboard",
    UserRole.STUDENT: "/user/dashboard",
}


@dataclass(frozen=True)
class Route:
    path: str
    page: str
    roles: FrozenSet[UserRole] = frozenset()
    require_auth: bool = True


@dataclass(frozen=True)
class Resolution:
    """Outcome of routing: either a page to render or a path to redirect to."""
    page: Optional[str] = None
    redirect: Optional[str] = None

    @property
    def is_redirect(self) -> bool:
        return self.redirect is not None


_STUDENT = frozenset({UserRole.STUDENT})
_ADMIN = frozenset({UserRole.ADMIN})

ROUTES: Dict[str, Route] = {
    route.path: route
    for route in (
        Route(LOGIN_PATH, "login", require_auth=False),
        Route("/user/dashboard", "user_dashboard", _STUDENT),
        Route("/user/certificates", "user_certificates", _STUDENT),
        Route("/user/downloads", "user_downloads", _STUDENT),
        Route("/user/student-info", "user_student_info", _STUDENT),
        Route("/user/company-info", "user_company_info", _STUDENT),
        Route("/admin/dashboard", "admin_dashboard", _ADMIN),
        Route("/admin/certificates", "admin_certificates", _ADMIN),
        Route("/admin/requests", "admin_requests", _ADMIN),
        Route("/admin/courses", "admin_courses", _ADMIN),
        Route("/admin/company-info", "admin_company_info", _ADMIN),
        Route("/admin/templates", "admin_templates", _ADMIN),
        Route("/admin/colleges", "admin_colleges", _ADMIN),
    )
}


def dashboard_for(role: UserRole) -> str:
    return DASHBOARDS[role]


def guard(route: Route, session: PortalSession) -> Resolution:
    """Auth gate wrapped around every page."""
    if not route.require_auth:
        # Signed-in users have no business on the login page
        if session.is_authenticated:
            return Resolution(redirect=dashboard_for(session.role))
        return Resolution(page=route.page)

    if not session.is_authenticated:
        return Resolution(redirect=LOGIN_PATH)

    if route.roles and session.role not in route.roles:
        logger.info(f"Role {session.role.value} may not open {route.path}, redirecting")
        return Resolution(redirect=dashboard_for(session.role))

    return Resolution(page=route.page)


def resolve(path: str, session: PortalSession) -> Resolution:
    """Resolve a URL path for the current session."""
    normalized = "/" + path.strip().strip("/") if path.strip("/ ") else "/"
    if normalized == "/":
        return Resolution(redirect=LOGIN_PATH)

    route = ROUTES.get(normalized)
    if route is None:
        return Resolution(page=NOT_FOUND_PAGE)
    return guard(route, session)

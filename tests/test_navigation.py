"""
Tests for console routing, the auth gate, and client-side search.
"""
from certportal.console.navigation import LOGIN_PATH, NOT_FOUND_PAGE, ROUTES, guard, resolve
from certportal.console.search import filter_rows, matches
from certportal.console.session import PortalSession
from certportal.db.models.user import UserRole


def _session(role):
    return PortalSession(email="someone@example.com", role=role, token="token")


def test_root_redirects_to_login():
    assert resolve("/", PortalSession()).redirect == LOGIN_PATH


def test_unknown_path_is_not_found():
    resolution = resolve("/nowhere", _session(UserRole.ADMIN))

    assert resolution.page == NOT_FOUND_PAGE
    assert not resolution.is_redirect


def test_signed_out_user_is_sent_to_login():
    assert resolve("/admin/courses", PortalSession()).redirect == LOGIN_PATH
    assert resolve("/user/certificates", PortalSession()).redirect == LOGIN_PATH


def test_login_page_for_signed_out_user():
    assert resolve("/login", PortalSession()).page == "login"


def test_signed_in_user_skips_login():
    assert resolve("/login", _session(UserRole.ADMIN)).redirect == "/admin/dashboard"
    assert resolve("/login", _session(UserRole.STUDENT)).redirect == "/user/dashboard"


def test_wrong_role_goes_to_own_dashboard():
    assert resolve("/admin/templates", _session(UserRole.STUDENT)).redirect == "/user/dashboard"
    assert resolve("/user/downloads", _session(UserRole.ADMIN)).redirect == "/admin/dashboard"


def test_every_admin_page_opens_for_admin():
    session = _session(UserRole.ADMIN)
    for path, route in ROUTES.items():
        if path.startswith("/admin/"):
            assert guard(route, session).page == route.page


def test_trailing_slash_is_ignored():
    assert resolve("/admin/colleges/", _session(UserRole.ADMIN)).page == "admin_colleges"


def test_logout_clears_session():
    session = _session(UserRole.ADMIN)
    session.clear()

    assert not session.is_authenticated
    assert resolve("/admin/dashboard", session).redirect == LOGIN_PATH


ROWS = [
    {"id": 1, "name": "Priya Sharma", "phone": "9876543210"},
    {"id": 12, "name": "Arjun Rao", "phone": "9123456780"},
    {"id": 3, "name": "Meera", "phone": None},
]


def test_search_is_case_insensitive_substring():
    assert filter_rows(ROWS, "PRIYA", ("name",)) == [ROWS[0]]


def test_search_matches_numeric_id():
    assert [r["id"] for r in filter_rows(ROWS, "1", ("id",))] == [1, 12]


def test_empty_term_keeps_all_rows():
    assert filter_rows(ROWS, "", ("name",)) == ROWS


def test_missing_field_never_matches():
    assert not matches(ROWS[2], "98", ("phone",))

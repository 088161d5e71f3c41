"""
Tests for the console pages, driven through PortalClient against the app.
"""
import json

import httpx
import pytest

from certportal.console.api_client import ApiError, PortalClient
from certportal.console.navigation import resolve
from certportal.console.pages import (
    TRIGGER_ISSUE_TITLE,
    CollegesPage,
    CoursesPage,
    StudentsPage,
    TemplatesPage,
)
from certportal.console.preview import CertificatePreviewer
from certportal.console.toast import Toaster
from certportal.core.errors import StoreError, UNDEFINED_COLUMN
from certportal.db.models.company import Company
from certportal.db.models.student import Student
from certportal.services import eligibility_service
from certportal.services.pdf_converter import convert_image_to_pdf
from certportal.services.template_service import DUPLICATE_TEMPLATE_MESSAGE
from conftest import ADMIN_EMAIL, ADMIN_PASSWORD


@pytest.fixture
def portal(client, admin_user):
    portal = PortalClient(client=client)
    portal.login(ADMIN_EMAIL, ADMIN_PASSWORD)
    return portal


@pytest.fixture
def offline():
    """A client whose transport records requests instead of sending them."""
    requests = []

    def handler(request):
        requests.append(request)
        return httpx.Response(500, json={"detail": "unexpected request"})

    http = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://portal.test")
    yield PortalClient(client=http), requests
    http.close()


@pytest.fixture
def eligibility_api():
    """A stand-in API that accepts eligibility updates and lists no students."""
    requests = []

    def handler(request):
        requests.append(request)
        if request.method == "PUT":
            body = json.loads(request.content)
            return httpx.Response(200, json={"success": True, "student_id": 7, "eligible": body["eligible"]})
        return httpx.Response(200, json=[])

    http = httpx.Client(transport=httpx.MockTransport(handler), base_url="http://portal.test")
    yield PortalClient(client=http), requests
    http.close()


def _issuable(db, student, png_bytes):
    student.certificate = png_bytes
    student.eligible = True
    student.certificate_approved = True
    db.commit()


# ----------------------------------------------------------------------
# session and client
# ----------------------------------------------------------------------

def test_login_populates_session(portal):
    assert portal.session.is_authenticated
    assert portal.session.email == ADMIN_EMAIL
    assert resolve("/login", portal.session).redirect == "/admin/dashboard"


def test_bad_login_raises_api_error(client, admin_user):
    portal = PortalClient(client=client)

    with pytest.raises(ApiError) as exc_info:
        portal.login(ADMIN_EMAIL, "wrong-password")

    assert exc_info.value.status_code == 401
    assert not portal.session.is_authenticated


def test_versioned_error_body_is_parsed(portal):
    with pytest.raises(ApiError) as exc_info:
        portal.set_eligibility(999, True)

    assert exc_info.value.not_found
    assert exc_info.value.message == "Student not found"


# ----------------------------------------------------------------------
# lookup pages
# ----------------------------------------------------------------------

def test_add_course_and_search(portal):
    page = CoursesPage(portal)

    assert page.add("  Python ")
    assert page.add("Java")

    assert page.toaster.last.description == "Course added successfully."
    assert [row["name"] for row in page.rows] == ["Java", "Python"]
    assert [row["name"] for row in page.search("py")] == ["Python"]
    assert len(page.search("")) == 2


def test_blank_name_never_reaches_api(offline):
    portal, requests = offline
    page = CoursesPage(portal)

    assert page.add("   ") is False
    assert page.edit(1, "") is False

    assert requests == []
    assert page.toaster.last.is_error
    assert page.toaster.last.description == "Course name is required."


def test_duplicate_course_shows_unique_message(portal):
    page = CoursesPage(portal)
    page.add("Python")

    assert page.add("Python") is False
    assert page.toaster.last.description == "A course with this name already exists."
    assert len(page.rows) == 1


def test_delete_missing_row_keeps_list(portal):
    page = CoursesPage(portal)
    page.add("Python")

    assert page.delete(999) is False

    assert page.toaster.last.is_error
    assert page.toaster.last.description == "Failed to delete course."
    assert [row["name"] for row in page.rows] == ["Python"]


def test_delete_can_be_cancelled(offline):
    portal, requests = offline
    page = CollegesPage(portal)

    assert page.delete(1, confirm=lambda prompt: False) is False
    assert requests == []


def test_fetch_failure_keeps_previous_rows(offline):
    portal, _requests = offline
    page = CollegesPage(portal)
    page.rows = [{"id": 1, "name": "Anna University"}]

    page.refresh()

    assert page.rows == [{"id": 1, "name": "Anna University"}]
    assert page.toaster.last.description == "Failed to fetch colleges data."
    assert page.loading is False


# ----------------------------------------------------------------------
# students page
# ----------------------------------------------------------------------

def test_add_student_requires_name_and_phone(offline):
    portal, requests = offline
    page = StudentsPage(portal)

    assert page.add("Priya", "  ") is False
    assert page.toaster.last.description == "Name and phone number are required."
    assert requests == []


def test_duplicate_phone_message(portal, student):
    page = StudentsPage(portal)

    assert page.add("Someone Else", student.phone) is False
    assert page.toaster.last.description == "Failed to add student. Phone number may already exist."


def test_search_students_by_phone(portal, student):
    page = StudentsPage(portal)
    page.add("Arjun Rao", "9123456780")

    assert [row["name"] for row in page.search("98765")] == ["Priya Sharma"]


def test_toggle_eligibility(portal, student, db):
    page = StudentsPage(portal)

    enabled = page.toggle_eligibility(student.id, False)
    db.refresh(student)
    assert enabled.description == "Student eligibility enabled successfully."
    assert student.eligible is True

    disabled = page.toggle_eligibility(student.id, True)
    db.refresh(student)
    assert disabled.description == "Student eligibility disabled successfully."
    assert student.eligible is False


def test_toggle_eligibility_rejects_bad_id(offline):
    portal, requests = offline
    page = StudentsPage(portal)

    toast = page.toggle_eligibility("abc", False)

    assert toast.is_error
    assert "Invalid student ID format" in toast.description
    assert requests == []


def test_toggle_eligibility_reports_stale_trigger(portal, student, monkeypatch):
    def failing_commit(db, action):
        db.rollback()
        raise StoreError(code=UNDEFINED_COLUMN, message='record "new" has no field "certificate_url"')

    monkeypatch.setattr(eligibility_service, "commit_or_raise", failing_commit)
    page = StudentsPage(portal)

    toast = page.toggle_eligibility(student.id, False)

    assert toast.title == TRIGGER_ISSUE_TITLE
    assert toast.is_error


def test_toggle_eligibility_reports_other_failures(portal):
    toast = StudentsPage(portal).toggle_eligibility(999, False)

    assert toast.description == "Failed to update student eligibility: Student not found"


# ----------------------------------------------------------------------
# certificate preview
# ----------------------------------------------------------------------

def test_preview_not_eligible_skips_conversion(portal, student, png_bytes, db):
    student.certificate = png_bytes
    db.commit()
    calls = []

    def converter(payload):
        calls.append(payload)
        return convert_image_to_pdf(payload)

    toaster = Toaster()
    previewer = CertificatePreviewer(portal, toaster, opener=lambda url: True, converter=converter)

    result = previewer.preview(student.id, student.name)

    assert calls == []
    assert result.pdf_path is None
    assert toaster.last.title == "Not Eligible"


def test_preview_unknown_student(portal):
    toaster = Toaster()

    CertificatePreviewer(portal, toaster, opener=lambda url: True).preview(999, "Nobody")

    assert toaster.last.title == "Preview Error"
    assert toaster.last.description == "Student not found"


def test_preview_opens_pdf(portal, student, png_bytes, db):
    _issuable(db, student, png_bytes)
    opened = []
    toaster = Toaster()
    previewer = CertificatePreviewer(portal, toaster, opener=lambda url: opened.append(url) or True, release_after=60)

    result = previewer.preview(student.id, student.name)
    result.release_timer.cancel()

    try:
        assert result.opened is True
        assert opened == [result.pdf_path.as_uri()]
        assert result.pdf_path.read_bytes().startswith(b"%PDF")
        assert toaster.last.title == "Preview Opened"
        assert toaster.last.description == "Certificate preview for Priya Sharma opened in new tab"
    finally:
        result.pdf_path.unlink()


def test_preview_falls_back_to_download(portal, student, png_bytes, db, tmp_path):
    _issuable(db, student, png_bytes)
    toaster = Toaster()
    previewer = CertificatePreviewer(portal, toaster, opener=lambda url: False, download_dir=tmp_path, release_after=0)

    result = previewer.preview(student.id, student.name)
    result.release_timer.join(timeout=5)

    assert result.opened is False
    assert result.download_path == tmp_path / "Priya_Sharma_certificate_preview.pdf"
    assert result.download_path.read_bytes().startswith(b"%PDF")
    assert toaster.last.title == "Preview Downloaded"
    # the temporary file is released, the download stays
    assert not result.pdf_path.exists()


# ----------------------------------------------------------------------
# templates page
# ----------------------------------------------------------------------

@pytest.fixture
def company(db):
    row = Company(name="AddWise Tech Innovations")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def test_select_file_rejects_locally(offline):
    portal, requests = offline
    page = TemplatesPage(portal)

    assert page.select_file("notes.txt", b"hello", "text/plain") is False
    assert page.toaster.last.description == "Please select an image file"
    assert page.select_file("big.png", b"\x00" * (5 * 1024 * 1024 + 1), "image/png") is False
    assert page.toaster.last.description == "File size must be less than 5MB"
    assert page.add(1) is False
    assert page.toaster.last.description == "Please select both a company and an image file"
    assert requests == []


def test_upload_template_and_toggle(portal, company, png_bytes):
    page = TemplatesPage(portal)
    page.refresh()
    assert [c["name"] for c in page.companies] == ["AddWise Tech Innovations"]

    assert page.select_file("template.png", png_bytes, "image/png")
    assert page.add(company.id)
    assert page.toaster.last.description == "Template uploaded successfully"
    assert page.selected_file is None
    assert page.companies_with_templates() == 1

    template_id = page.rows[0]["id"]
    assert page.toggle_selected(template_id, False)
    assert page.toaster.last.description == "Template selected successfully"
    assert page.rows[0]["is_selected"] is True


def test_second_template_blocked_locally(portal, company, png_bytes):
    page = TemplatesPage(portal)
    page.select_file("template.png", png_bytes, "image/png")
    page.add(company.id)

    page.select_file("again.png", png_bytes, "image/png")

    assert page.add(company.id) is False
    assert page.toaster.last.description == DUPLICATE_TEMPLATE_MESSAGE


def test_second_template_blocked_by_api(portal, company, png_bytes):
    first = TemplatesPage(portal)
    first.select_file("template.png", png_bytes, "image/png")
    first.add(company.id)

    # a page whose list is stale still gets the API's answer
    stale = TemplatesPage(portal)
    stale.select_file("again.png", png_bytes, "image/png")

    assert stale.add(company.id) is False
    assert stale.toaster.last.description == DUPLICATE_TEMPLATE_MESSAGE


def test_dashboard_stats_through_client(portal, student, db):
    assert portal.dashboard_stats()["students"] == db.query(Student).count()


def test_failed_template_upload_refreshes_list(portal, company, png_bytes):
    page = TemplatesPage(portal)
    page.rows = [{"id": 42, "company_id": 7, "company_name": "Gone Ltd"}]
    page.select_file("template.png", png_bytes, "image/png")

    assert page.add(999) is False

    assert page.toaster.last.description == "Failed to add template"
    assert page.rows == portal.list("templates") == []


# ----------------------------------------------------------------------
# error wording and request bodies
# ----------------------------------------------------------------------

def test_add_student_with_missing_college(portal):
    page = StudentsPage(portal)

    assert page.add("Ravi Kumar", "9000000001", college_id=999) is False

    assert page.toaster.last.description == "Failed to add student."
    assert page.rows == []


def test_edit_student_with_missing_college(portal, student):
    page = StudentsPage(portal)

    assert page.edit(student.id, college_id=999) is False

    assert page.toaster.last.description == "Failed to update student."


def test_eligibility_request_body(eligibility_api):
    portal, requests = eligibility_api
    page = StudentsPage(portal)

    page.toggle_eligibility(7, False)
    page.toggle_eligibility(7, True)

    puts = [r for r in requests if r.method == "PUT"]
    assert [r.url.path for r in puts] == ["/v1/students/7/eligibility"] * 2
    assert [json.loads(r.content) for r in puts] == [{"eligible": True}, {"eligible": False}]
    assert page.toaster.history[0].description == "Student eligibility enabled successfully."
    assert page.toaster.history[-1].description == "Student eligibility disabled successfully."


def test_unprefixed_trigger_message_gets_trigger_toast():
    def handler(request):
        return httpx.Response(500, json={"error": 'column "certificate_url" does not exist'})

    with httpx.Client(transport=httpx.MockTransport(handler), base_url="http://portal.test") as http:
        toast = StudentsPage(PortalClient(client=http)).toggle_eligibility(7, False)

    assert toast.title == TRIGGER_ISSUE_TITLE


def test_colleges_search_by_name_and_id(offline):
    portal, _requests = offline
    page = CollegesPage(portal)
    page.rows = [{"id": 12, "name": "Anna University"}, {"id": 3, "name": "Zenith Institute"}]

    assert [row["id"] for row in page.search("12")] == [12]
    assert [row["id"] for row in page.search("zenith")] == [3]

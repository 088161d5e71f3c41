"""
Console pages.

Each page keeps its own UI state (rows, search term, selected file) and
turns every user action into: validation -> remote call -> toast ->
re-fetch. Validation failures never reach the API.
"""
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from certportal.console.api_client import ApiError, PortalClient
from certportal.console.preview import CertificatePreviewer, PreviewResult
from certportal.console.search import filter_rows
from certportal.console.toast import Toast, Toaster
from certportal.core.config import MAX_UPLOAD_BYTES
from certportal.core.errors import FOREIGN_KEY_VIOLATION, TRIGGER_ERROR_PREFIX, UNIQUE_VIOLATION, is_trigger_error
from certportal.services.template_service import DUPLICATE_TEMPLATE_MESSAGE, UploadRejected, validate_image_upload

logger = logging.getLogger(__name__)

Confirm = Callable[[str], bool]

TRIGGER_ISSUE_TITLE = "Database Configuration Issue"
TRIGGER_ISSUE_MESSAGE = (
    "Database trigger still references dropped columns. "
    "Remove the triggers that reference dropped columns from the students table."
)


def always_confirm(_prompt: str) -> bool:
    return True


def _blank(value: Optional[str]) -> bool:
    return value is None or not str(value).strip()


class EntityPage:
    """List/search/add/edit/delete page over one API collection."""

    entity: str = ""
    label: str = ""
    plural: str = ""
    search_fields: Sequence[str] = ("name", "id")

    def __init__(self, client: PortalClient, toaster: Optional[Toaster] = None):
        self.client = client
        self.toaster = toaster or Toaster()
        self.rows: List[Dict[str, Any]] = []
        self.search_term = ""
        self.loading = False

    @property
    def filtered(self) -> List[Dict[str, Any]]:
        return filter_rows(self.rows, self.search_term, self.search_fields)

    def search(self, term: str) -> List[Dict[str, Any]]:
        self.search_term = term
        return self.filtered

    def refresh(self) -> List[Dict[str, Any]]:
        """Re-fetch the list. On failure the previous rows are kept."""
        self.loading = True
        try:
            self.rows = self.client.list(self.entity)
        except ApiError as e:
            logger.error(f"Error fetching {self.entity}: {e.message}")
            self.toaster.error(f"Failed to fetch {self.plural or self.label + 's'} data.")
        finally:
            self.loading = False
        return self.rows

    # messages for store errors; pages override where the wording differs.
    # in_use_message applies to deletes only
    def unique_message(self, action: str) -> str:
        return f"A {self.label} with this name already exists."

    def in_use_message(self, action: str) -> str:
        return f"Failed to {action} {self.label}. It may be in use by other records."

    def failure_message(self, action: str) -> str:
        return f"Failed to {action} {self.label}."

    def _mutate(self, action: str, call: Callable[[], Any], success: str) -> bool:
        """Run one remote mutation, toast the outcome, re-fetch the list."""
        try:
            call()
        except ApiError as e:
            if e.code == UNIQUE_VIOLATION:
                self.toaster.error(self.unique_message(action))
            elif e.code == FOREIGN_KEY_VIOLATION and action == "delete":
                self.toaster.error(self.in_use_message(action))
            else:
                self.toaster.error(self.failure_message(action))
            self.refresh()
            return False

        self.toaster.success(success)
        self.refresh()
        return True

    def delete(self, row_id: int, confirm: Confirm = always_confirm) -> bool:
        if not confirm(f"Are you sure you want to delete this {self.label}?"):
            return False
        return self._mutate(
            "delete",
            lambda: self.client.delete(self.entity, row_id),
            f"{self.label.capitalize()} deleted successfully.",
        )


class LookupPage(EntityPage):
    """Courses, colleges and companies: a single required name field."""

    required_message: str = ""

    def _validate_name(self, name: Optional[str]) -> Optional[str]:
        if _blank(name):
            self.toaster.error(self.required_message or f"Please enter a {self.label} name.")
            return None
        return name.strip()

    def add(self, name: str) -> bool:
        cleaned = self._validate_name(name)
        if cleaned is None:
            return False
        return self._mutate(
            "add",
            lambda: self.client.create(self.entity, {"name": cleaned}),
            f"{self.label.capitalize()} added successfully.",
        )

    def edit(self, row_id: int, name: str) -> bool:
        cleaned = self._validate_name(name)
        if cleaned is None:
            return False
        return self._mutate(
            "update",
            lambda: self.client.update(self.entity, row_id, {"name": cleaned}),
            f"{self.label.capitalize()} updated successfully.",
        )


class CoursesPage(LookupPage):
    entity = "courses"
    label = "course"
    required_message = "Course name is required."

    def in_use_message(self, action: str) -> str:
        return "Failed to delete course. It may be in use by students."


class CollegesPage(LookupPage):
    entity = "colleges"
    label = "college"

    def in_use_message(self, action: str) -> str:
        return "Failed to delete college. It may be in use by students."


class CompaniesPage(LookupPage):
    entity = "companies"
    label = "company"
    plural = "companies"


class StudentsPage(EntityPage):
    """Admin Certificates page: students, eligibility, approval and preview."""

    entity = "students"
    label = "student"
    search_fields = ("name", "id", "phone")

    def __init__(self, client: PortalClient, toaster: Optional[Toaster] = None,
                 previewer: Optional[CertificatePreviewer] = None):
        super().__init__(client, toaster)
        self.previewer = previewer or CertificatePreviewer(client, self.toaster)

    def unique_message(self, action: str) -> str:
        return f"Failed to {action} student. Phone number may already exist."

    def add(self, name: str, phone: str, year: Optional[int] = None,
            branch: Optional[str] = None, college_id: Optional[int] = None) -> bool:
        if _blank(name) or _blank(phone):
            self.toaster.error("Name and phone number are required.")
            return False
        payload = {
            "name": name.strip(),
            "phone": phone.strip(),
            "year": year,
            "branch": branch.strip() if branch and branch.strip() else None,
            "college_id": college_id,
        }
        return self._mutate(
            "add", lambda: self.client.create(self.entity, payload), "Student added successfully."
        )

    def edit(self, student_id: int, **fields: Any) -> bool:
        for required in ("name", "phone"):
            if required in fields and _blank(fields[required]):
                self.toaster.error("Name and phone number are required.")
                return False
        return self._mutate(
            "update",
            lambda: self.client.update(self.entity, student_id, fields),
            "Student updated successfully.",
        )

    def toggle_eligibility(self, student_id: Any, current: bool) -> Toast:
        """Flip a student's eligibility through the /v1 endpoint."""
        try:
            numeric_id = int(student_id)
        except (TypeError, ValueError):
            return self.toaster.error(
                f"Failed to update student eligibility: Invalid student ID format: {student_id}"
            )

        new_eligibility = not current
        try:
            self.client.set_eligibility(numeric_id, new_eligibility)
        except ApiError as e:
            if TRIGGER_ERROR_PREFIX in e.message or is_trigger_error(e.message):
                return self.toaster.error(TRIGGER_ISSUE_MESSAGE, title=TRIGGER_ISSUE_TITLE)
            return self.toaster.error(f"Failed to update student eligibility: {e.message}")

        toast = self.toaster.success(
            f"Student eligibility {'enabled' if new_eligibility else 'disabled'} successfully."
        )
        self.refresh()
        return toast

    def set_approval(self, student_id: int, approved: bool) -> bool:
        return self._mutate(
            "update",
            lambda: self.client.set_approval(student_id, approved),
            f"Certificate {'approved' if approved else 'approval revoked'} successfully.",
        )

    def preview_certificate(self, student_id: int, student_name: str) -> PreviewResult:
        return self.previewer.preview(student_id, student_name)


class TemplatesPage(EntityPage):
    entity = "templates"
    label = "template"
    search_fields = ("company_name", "id")

    def __init__(self, client: PortalClient, toaster: Optional[Toaster] = None):
        super().__init__(client, toaster)
        self.companies: List[Dict[str, Any]] = []
        self.selected_file: Optional[Dict[str, Any]] = None

    def refresh(self) -> List[Dict[str, Any]]:
        super().refresh()
        try:
            self.companies = self.client.list("companies")
        except ApiError as e:
            logger.error(f"Error fetching companies: {e.message}")
        return self.rows

    def select_file(self, filename: str, content: bytes, content_type: Optional[str]) -> bool:
        """Pick the upload; rejects non-images and files over the size limit without any remote call."""
        try:
            validate_image_upload(content_type, len(content), MAX_UPLOAD_BYTES)
        except UploadRejected as e:
            self.toaster.error(str(e))
            return False
        self.selected_file = {"filename": filename, "content": content, "content_type": content_type}
        return True

    def add(self, company_id: Optional[int]) -> bool:
        if not company_id or not self.selected_file:
            self.toaster.error("Please select both a company and an image file")
            return False

        if any(row.get("company_id") == company_id for row in self.rows):
            self.toaster.error(DUPLICATE_TEMPLATE_MESSAGE)
            return False

        upload = self.selected_file
        try:
            self.client.upload_template(company_id, upload["filename"], upload["content"], upload["content_type"])
        except ApiError as e:
            self.toaster.error(e.message if e.code == "TEMPLATE_EXISTS" else "Failed to add template")
            self.refresh()
            return False

        self.toaster.success("Template uploaded successfully")
        self.selected_file = None
        self.refresh()
        return True

    def toggle_selected(self, template_id: int, current: bool) -> bool:
        return self._mutate(
            "update",
            lambda: self.client.set_template_selection(template_id, not current),
            f"Template {'selected' if not current else 'deselected'} successfully",
        )

    def failure_message(self, action: str) -> str:
        if action == "update":
            return "Failed to update template selection"
        return f"Failed to {action} template"

    def companies_with_templates(self) -> int:
        return len({row.get("company_id") for row in self.rows})

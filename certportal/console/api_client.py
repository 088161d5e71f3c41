"""
HTTP client for the portal API.

One method per remote operation, each a single attempt with no retries.
Non-2xx responses raise ApiError carrying the status, the store error code
(when the API reports one) and a readable message.
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from certportal.core.config import API_BASE_URL, API_TIMEOUT_SECONDS
from certportal.console.session import PortalSession
from certportal.db.models.user import UserRole

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A failed API call."""

    def __init__(self, status_code: int, message: str, code: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.code = code
        super().__init__(message)

    @property
    def not_found(self) -> bool:
        return self.status_code == 404


def _parse_error(response: httpx.Response) -> ApiError:
    try:
        body = response.json()
    except ValueError:
        return ApiError(response.status_code, response.text or f"HTTP {response.status_code}")

    if isinstance(body, dict) and "error" in body:
        return ApiError(response.status_code, str(body["error"]))

    detail = body.get("detail") if isinstance(body, dict) else body
    if isinstance(detail, dict):
        return ApiError(response.status_code, str(detail.get("message", detail)), detail.get("code"))
    if isinstance(detail, list):
        message = "; ".join(str(err.get("msg", err)) for err in detail if isinstance(err, dict))
        return ApiError(response.status_code, message or "Validation failed")
    return ApiError(response.status_code, str(detail) if detail else f"HTTP {response.status_code}")


class PortalClient:
    """
    Thin wrapper over httpx.Client.

    Pass ``client`` to reuse an existing httpx.Client (a FastAPI TestClient
    works too); otherwise one is created for ``base_url``.
    """

    def __init__(
        self,
        base_url: str = API_BASE_URL,
        session: Optional[PortalSession] = None,
        client: Optional[httpx.Client] = None,
        timeout: float = API_TIMEOUT_SECONDS,
    ):
        self.session = session or PortalSession()
        self._http = client or httpx.Client(base_url=base_url, timeout=timeout)

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info):
        self.close()

    # ------------------------------------------------------------------
    # transport
    # ------------------------------------------------------------------

    def _headers(self) -> Dict[str, str]:
        if self.session.token:
            return {"Authorization": f"Bearer {self.session.token}"}
        return {}

    def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = self._http.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError(0, f"Network error: {e}") from e

        if response.is_success:
            return response

        error = _parse_error(response)
        logger.warning(f"{method} {path} -> {response.status_code}: {error.message}")
        raise error

    def _json(self, method: str, path: str, **kwargs) -> Any:
        response = self._request(method, path, **kwargs)
        if response.status_code == 204 or not response.content:
            return None
        return response.json()

    # ------------------------------------------------------------------
    # auth
    # ------------------------------------------------------------------

    def login(self, email: str, password: str) -> PortalSession:
        body = self._json("POST", "/auth/login", data={"username": email, "password": password})
        self.session.email = email.strip().lower()
        self.session.role = UserRole(body["role"])
        self.session.token = body["access_token"]
        logger.info(f"Logged in as {self.session.email} ({self.session.role.value})")
        return self.session

    def logout(self) -> None:
        self.session.clear()

    # ------------------------------------------------------------------
    # generic entity operations
    # ------------------------------------------------------------------

    def list(self, entity: str) -> List[Dict[str, Any]]:
        return self._json("GET", f"/{entity}")

    def get(self, entity: str, row_id: int) -> Dict[str, Any]:
        return self._json("GET", f"/{entity}/{row_id}")

    def create(self, entity: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._json("POST", f"/{entity}", json=payload)

    def update(self, entity: str, row_id: int, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._json("PUT", f"/{entity}/{row_id}", json=payload)

    def delete(self, entity: str, row_id: int) -> None:
        self._request("DELETE", f"/{entity}/{row_id}")

    # ------------------------------------------------------------------
    # students and certificates
    # ------------------------------------------------------------------

    def set_eligibility(self, student_id: int, eligible: bool) -> Dict[str, Any]:
        return self._json("PUT", f"/v1/students/{student_id}/eligibility", json={"eligible": eligible})

    def set_approval(self, student_id: int, approved: bool) -> Dict[str, Any]:
        return self._json("PUT", f"/students/{student_id}/approval", json={"approved": approved})

    def get_certificate(self, student_id: int) -> Dict[str, Any]:
        return self._json("GET", f"/students/{student_id}/certificate")

    def upload_certificate(self, student_id: int, filename: str, content: bytes, content_type: str) -> Dict[str, Any]:
        files = {"file": (filename, content, content_type)}
        return self._json("PUT", f"/students/{student_id}/certificate", files=files)

    def my_student(self) -> Dict[str, Any]:
        return self._json("GET", "/me/student")

    def download_my_certificate(self) -> bytes:
        return self._request("GET", "/me/certificate").content

    # ------------------------------------------------------------------
    # templates and dashboard
    # ------------------------------------------------------------------

    def upload_template(self, company_id: int, filename: str, content: bytes, content_type: str) -> Dict[str, Any]:
        files = {"file": (filename, content, content_type)}
        return self._json("POST", "/templates", data={"company_id": str(company_id)}, files=files)

    def set_template_selection(self, template_id: int, is_selected: bool) -> Dict[str, Any]:
        return self._json("PUT", f"/templates/{template_id}/selection", json={"is_selected": is_selected})

    def dashboard_stats(self) -> Dict[str, Any]:
        return self._json("GET", "/dashboard/stats")

"""
Certificate preview pipeline.

fetch certificate row -> check eligibility, approval, blob -> convert the
image to PDF locally -> open it in a browser tab, or save it as a download
when no browser tab can be opened -> release the temporary file after
PREVIEW_RELEASE_SECONDS.
"""
import logging
import shutil
import tempfile
import threading
import webbrowser
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from certportal.console.api_client import ApiError, PortalClient
from certportal.console.toast import Toaster
from certportal.core.config import PREVIEW_RELEASE_SECONDS
from certportal.services.certificate_service import REASONS, unavailable_reason
from certportal.services.pdf_converter import ConversionResult, convert_image_to_pdf

logger = logging.getLogger(__name__)


@dataclass
class PreviewResult:
    opened: bool = False
    pdf_path: Optional[Path] = None
    download_path: Optional[Path] = None
    release_timer: Optional[threading.Timer] = None


def release_file(path: Path) -> None:
    try:
        path.unlink()
        logger.debug(f"Released preview file {path}")
    except FileNotFoundError:
        pass


def safe_filename(name: str) -> str:
    cleaned = "".join(ch if ch.isalnum() or ch in "-_" else "_" for ch in name.strip())
    return cleaned or "student"


class CertificatePreviewer:
    def __init__(
        self,
        client: PortalClient,
        toaster: Toaster,
        opener: Callable[[str], bool] = webbrowser.open_new_tab,
        converter: Callable[[str], ConversionResult] = convert_image_to_pdf,
        download_dir: Optional[Path] = None,
        release_after: float = PREVIEW_RELEASE_SECONDS,
    ):
        self.client = client
        self.toaster = toaster
        self.opener = opener
        self.converter = converter
        self.download_dir = Path(download_dir) if download_dir else Path.cwd()
        self.release_after = release_after

    def _error(self, description: str) -> PreviewResult:
        self.toaster.error(description, title="Preview Error")
        return PreviewResult()

    def preview(self, student_id: int, student_name: str) -> PreviewResult:
        logger.info(f"Starting certificate preview for student_id={student_id}")
        try:
            data = self.client.get_certificate(student_id)
        except ApiError as e:
            if e.not_found:
                return self._error("Student not found")
            return self._error("Failed to fetch student certificate data")

        reason = unavailable_reason(data.get("eligible"), data.get("certificate_approved"), data.get("certificate"))
        if reason:
            title, message = REASONS[reason]
            self.toaster.error(message, title=title)
            return PreviewResult()

        result = self.converter(data["certificate"])
        if not result.success or not result.pdf:
            logger.error(f"Failed to convert certificate to PDF: {result.error}")
            return self._error(result.error or "Failed to convert certificate to PDF")

        with tempfile.NamedTemporaryFile(prefix="certificate_", suffix=".pdf", delete=False) as handle:
            handle.write(result.pdf)
            pdf_path = Path(handle.name)

        preview = PreviewResult(pdf_path=pdf_path)
        preview.opened = bool(self.opener(pdf_path.as_uri()))

        if preview.opened:
            self.toaster.success(
                f"Certificate preview for {student_name} opened in new tab",
                title="Preview Opened",
            )
        else:
            logger.warning("Browser tab could not be opened, saving preview as a download")
            self.download_dir.mkdir(parents=True, exist_ok=True)
            preview.download_path = self.download_dir / f"{safe_filename(student_name)}_certificate_preview.pdf"
            shutil.copyfile(pdf_path, preview.download_path)
            self.toaster.success(
                "Pop-up was blocked. Certificate preview has been downloaded instead.",
                title="Preview Downloaded",
            )

        preview.release_timer = threading.Timer(self.release_after, release_file, args=(pdf_path,))
        preview.release_timer.daemon = True
        preview.release_timer.start()
        return preview

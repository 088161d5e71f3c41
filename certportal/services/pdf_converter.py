"""
Image to PDF conversion for certificates.

Certificates are stored as images (raw bytes, or base64 / data-URL text for
rows written by older clients). Conversion is done with PyMuPDF: the image
is opened as a one-page document and re-emitted as PDF at its own size.
"""
import base64
import binascii
import logging
from dataclasses import dataclass
from typing import Optional, Union

import fitz  # pymupdf

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"

# (magic prefix, PyMuPDF filetype, MIME type)
_IMAGE_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", "png", "image/png"),
    (b"\xff\xd8\xff", "jpeg", "image/jpeg"),
    (b"GIF87a", "gif", "image/gif"),
    (b"GIF89a", "gif", "image/gif"),
    (b"BM", "bmp", "image/bmp"),
    (b"II*\x00", "tiff", "image/tiff"),
    (b"MM\x00*", "tiff", "image/tiff"),
)


class ConversionError(ValueError):
    """Raised when certificate data cannot be turned into a PDF."""


@dataclass
class ConversionResult:
    success: bool
    pdf: Optional[bytes] = None
    error: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.pdf) if self.pdf else 0


def detect_image_type(data: bytes) -> Optional[str]:
    """Return the PyMuPDF filetype for an image payload, or None if unrecognised."""
    for magic, filetype, _mime in _IMAGE_SIGNATURES:
        if data.startswith(magic):
            return filetype
    return None


def image_mime_type(data: bytes) -> Optional[str]:
    for magic, _filetype, mime in _IMAGE_SIGNATURES:
        if data.startswith(magic):
            return mime
    return None


def decode_image_payload(payload: Union[bytes, bytearray, memoryview, str]) -> bytes:
    """
    Normalise certificate data to raw image bytes.

    Accepts raw bytes, a ``data:image/...;base64,`` URL, or bare base64 text
    (either as str or as the ASCII bytes of that text).
    """
    if isinstance(payload, memoryview):
        payload = payload.tobytes()
    if isinstance(payload, (bytes, bytearray)):
        raw = bytes(payload)
        if detect_image_type(raw):
            return raw
        try:
            payload = raw.decode("ascii")
        except UnicodeDecodeError as e:
            raise ConversionError("Unsupported certificate image format") from e

    text = payload.strip()
    if text.startswith("data:"):
        header, _, text = text.partition(",")
        if ";base64" not in header:
            raise ConversionError("Certificate data URL is not base64 encoded")
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise ConversionError("Certificate data is not valid base64") from e


def image_to_pdf(image: bytes) -> bytes:
    """Convert one image to a single-page PDF. Raises ConversionError on failure."""
    if not image:
        raise ConversionError("Certificate image is empty")

    filetype = detect_image_type(image)
    if filetype is None:
        raise ConversionError("Unsupported certificate image format")

    try:
        with fitz.open(stream=image, filetype=filetype) as img_doc:
            pdf_bytes = img_doc.convert_to_pdf()
    except (RuntimeError, ValueError) as e:
        logger.error(f"PyMuPDF failed to convert {filetype} image: {e}")
        raise ConversionError("Failed to convert certificate to PDF") from e

    if not pdf_bytes:
        raise ConversionError("Generated PDF is empty")
    return pdf_bytes


def convert_image_to_pdf(payload: Union[bytes, str]) -> ConversionResult:
    """Convert certificate data to PDF, reporting failure in the result instead of raising."""
    try:
        pdf = image_to_pdf(decode_image_payload(payload))
    except ConversionError as e:
        return ConversionResult(success=False, error=str(e))
    logger.debug(f"Certificate converted to PDF: {len(pdf)} bytes")
    return ConversionResult(success=True, pdf=pdf)

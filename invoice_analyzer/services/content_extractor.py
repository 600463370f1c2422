"""
Turns an uploaded invoice file into content the generative model can read.

PDFs are reduced to their plain text with pypdf. Images are passed through
as a base64 payload tagged with their media type.
"""

import base64
from io import BytesIO
from pathlib import Path
from loguru import logger
from pypdf import PdfReader
from .invoice_types import ExtractedContent
from ..core.errors import ExtractionError

IMAGE_MEDIA_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
}


def extract_pdf_text(file_bytes: bytes) -> str:
    """Extract the text of every page, one page per line block."""
    try:
        reader = PdfReader(BytesIO(file_bytes))
        return "\n".join((page.extract_text() or "") for page in reader.pages)
    except Exception as e:
        logger.error(f"PDF text extraction failed: {str(e)}")
        raise ExtractionError(f"Failed to extract PDF text: {str(e)}") from e


def extract_content(file_path: str | Path, extension: str | None = None) -> ExtractedContent:
    """
    Read an invoice file and prepare it for the model.

    Args:
        file_path: Path of the staged upload
        extension: File extension hint (".pdf", ".png", ...); taken from the
            path when omitted

    Returns:
        ExtractedContent of kind "text" for PDFs, "image" for JPEG/PNG

    Raises:
        ExtractionError: unreadable file, unsupported type, or unparseable PDF
    """
    path = Path(file_path)
    ext = (extension or path.suffix).lower()
    if not ext.startswith("."):
        ext = f".{ext}"

    if ext != ".pdf" and ext not in IMAGE_MEDIA_TYPES:
        raise ExtractionError(f"Unsupported file type: {ext}")

    try:
        file_bytes = path.read_bytes()
    except OSError as e:
        logger.error(f"Could not read uploaded file {path}: {str(e)}")
        raise ExtractionError(f"Could not read uploaded file: {path.name}") from e

    if ext == ".pdf":
        text = extract_pdf_text(file_bytes)
        logger.info("Extracted PDF text", file=path.name, chars=len(text))
        return ExtractedContent(kind="text", text=text)

    logger.info("Encoded invoice image", file=path.name, size_bytes=len(file_bytes))
    return ExtractedContent(
        kind="image",
        data=base64.b64encode(file_bytes).decode("ascii"),
        mime_type=IMAGE_MEDIA_TYPES[ext],
    )

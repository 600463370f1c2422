import time
from pathlib import Path
from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import RedirectResponse
from loguru import logger
from starlette.concurrency import run_in_threadpool
from ..deps import ALLOWED_EXTENSIONS, ALLOWED_MEDIA_TYPES, get_store
from ...core.config import settings
from ...core.errors import UploadRejected
from ...services.pipeline import extract_invoice_data
from ...services.storage import InvoiceStoreBase

router = APIRouter(prefix="/api/invoices", tags=["invoices"])


def _validate_upload(invoice: UploadFile | None) -> str:
    """Check the file is present and allowed; returns the lower-case extension"""
    if invoice is None or not invoice.filename:
        raise UploadRejected("No file uploaded")

    extension = Path(invoice.filename).suffix.lower()
    media_type = (invoice.content_type or "").lower()
    if extension not in ALLOWED_EXTENSIONS or media_type not in ALLOWED_MEDIA_TYPES:
        raise UploadRejected("Only JPEG, PNG and PDF invoices are accepted")
    return extension


def _stage_upload(filename: str, content: bytes) -> Path:
    upload_dir = Path(settings.upload_dir)
    upload_dir.mkdir(parents=True, exist_ok=True)
    staged = upload_dir / f"{int(time.time() * 1000)}-{Path(filename).name}"
    staged.write_bytes(content)
    return staged


def _remove_staged(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"File cleanup error for {path}: {str(e)}")


async def process_upload(invoice: UploadFile | None, store: InvoiceStoreBase) -> tuple[str, dict]:
    """
    Validate, stage, extract and store one uploaded invoice.

    Returns:
        (invoice ID, stored record)
    """
    _validate_upload(invoice)

    content = await invoice.read(settings.max_upload_bytes + 1)
    if len(content) > settings.max_upload_bytes:
        raise UploadRejected(
            f"File too large (limit {settings.max_upload_bytes // (1024 * 1024)} MB)",
            status_code=413,
        )

    logger.info("Invoice upload received", filename=invoice.filename, size_bytes=len(content))
    staged = _stage_upload(invoice.filename, content)
    try:
        record = await run_in_threadpool(extract_invoice_data, str(staged), invoice.filename)
        invoice_id = await run_in_threadpool(store.insert, record)
    finally:
        _remove_staged(staged)

    logger.info("Invoice stored", invoice_id=invoice_id, filename=invoice.filename)
    return invoice_id, record


@router.post("/upload")
async def upload_invoice(
    invoice: UploadFile | None = File(None),
    store: InvoiceStoreBase = Depends(get_store),
):
    """
    Upload an invoice (JPEG, PNG or PDF, max 5 MB), extract its data with
    Gemini, and store the result.

    Example response:
    {
        "success": true,
        "invoiceId": "6f1c...",
        "data": {"vendorName": "ACME Corp", "invoiceNumber": "INV-001", ...}
    }
    """
    invoice_id, record = await process_upload(invoice, store)
    return {
        "success": True,
        "invoiceId": invoice_id,
        "data": {**record, "_id": invoice_id},
    }


@router.get("")
def list_invoices(store: InvoiceStoreBase = Depends(get_store)):
    """List all invoices, newest upload first"""
    return {"success": True, "data": store.list_all()}


# Registered before "/{invoice_id}" so "search" is not taken for an ID
@router.get("/search")
def search_invoices(query: str | None = None, store: InvoiceStoreBase = Depends(get_store)):
    """
    Search vendor name, invoice number and line item descriptions.

    Without a query this redirects to the full list.
    """
    if not query:
        return RedirectResponse(url=router.prefix, status_code=302)
    return {"success": True, "data": store.search(query)}


@router.get("/{invoice_id}")
def get_invoice(invoice_id: str, store: InvoiceStoreBase = Depends(get_store)):
    return {"success": True, "data": store.get_by_id(invoice_id)}


@router.delete("/{invoice_id}")
def delete_invoice(invoice_id: str, store: InvoiceStoreBase = Depends(get_store)):
    store.delete_by_id(invoice_id)
    logger.info("Invoice deleted", invoice_id=invoice_id)
    return {"success": True}

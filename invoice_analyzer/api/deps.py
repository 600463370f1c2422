from ..services.storage import InvoiceStoreBase, get_invoice_store

ALLOWED_EXTENSIONS = {".jpeg", ".jpg", ".png", ".pdf"}
ALLOWED_MEDIA_TYPES = {"image/jpeg", "image/jpg", "image/png", "application/pdf"}


def get_store() -> InvoiceStoreBase:
    """FastAPI dependency for the shared invoice store (override in tests)"""
    return get_invoice_store()

from loguru import logger
from .invoice_store_base import InvoiceStoreBase
from .invoices_memory import InMemoryInvoiceStore
from .invoices_sqlite import SQLiteInvoiceStore
from ...core.config import settings

_invoice_store: InvoiceStoreBase | None = None


def create_invoice_store() -> InvoiceStoreBase:
    """Build the store selected by INVOICE_STORE ("sqlite" or "memory")"""
    if settings.invoice_store == "memory":
        return InMemoryInvoiceStore()
    if settings.invoice_store == "sqlite":
        return SQLiteInvoiceStore(settings.sqlite_db_path)
    raise ValueError(f"Unknown INVOICE_STORE: {settings.invoice_store!r}")


def get_invoice_store() -> InvoiceStoreBase:
    """Process-wide store, created on first use and shared by all requests."""
    global _invoice_store
    if _invoice_store is None:
        _invoice_store = create_invoice_store()
        logger.info("Invoice store ready", backend=type(_invoice_store).__name__)
    return _invoice_store


def close_invoice_store() -> None:
    global _invoice_store
    if _invoice_store is not None:
        _invoice_store.close()
        _invoice_store = None
        logger.info("Invoice store closed")


__all__ = [
    "InvoiceStoreBase",
    "InMemoryInvoiceStore",
    "SQLiteInvoiceStore",
    "create_invoice_store",
    "get_invoice_store",
    "close_invoice_store",
]

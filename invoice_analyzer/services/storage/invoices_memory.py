"""
In-memory invoice store (for demo and test purposes).
For persistence across restarts, use SQLiteInvoiceStore.
"""
import copy
import uuid
from typing import Dict
from .invoice_store_base import InvoiceStoreBase
from ...core.errors import NotFound


class InMemoryInvoiceStore(InvoiceStoreBase):
    def __init__(self):
        self._invoices: Dict[str, dict] = {}

    def insert(self, record: dict) -> str:
        """Store a copy of the record under a new UUID"""
        invoice_id = str(uuid.uuid4())
        stored = copy.deepcopy(record)
        stored["_id"] = invoice_id
        self._invoices[invoice_id] = stored
        return invoice_id

    def list_all(self) -> list:
        """All invoices, newest upload first (insertion order breaks ties)"""
        ordered = sorted(
            enumerate(self._invoices.values()),
            key=lambda pair: (str(pair[1].get("uploadDate") or ""), pair[0]),
            reverse=True,
        )
        return [copy.deepcopy(record) for _, record in ordered]

    def get_by_id(self, invoice_id: str) -> dict:
        if invoice_id not in self._invoices:
            raise NotFound()
        return copy.deepcopy(self._invoices[invoice_id])

    def delete_by_id(self, invoice_id: str) -> bool:
        if self._invoices.pop(invoice_id, None) is None:
            raise NotFound()
        return True

    def clear(self) -> None:
        self._invoices.clear()

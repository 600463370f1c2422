"""
Abstract base class for invoice store implementations.

Defines the interface that all invoice stores must implement,
enabling dependency injection and easy swapping of storage backends.
"""

from abc import ABC, abstractmethod


def matches_query(record: dict, query: str) -> bool:
    """
    Case-insensitive substring match on vendor name, invoice number,
    or any line item description.
    """
    needle = query.casefold()

    for key in ("vendorName", "invoiceNumber"):
        value = record.get(key)
        if value is not None and needle in str(value).casefold():
            return True

    items = record.get("items")
    if isinstance(items, list):
        for item in items:
            if not isinstance(item, dict):
                continue
            description = item.get("description")
            if description is not None and needle in str(description).casefold():
                return True
    return False


class InvoiceStoreBase(ABC):
    """
    Abstract base class for invoice persistence.

    Records are schemaless JSON documents as returned by the extraction
    pipeline. Implementations can use:
    - In-memory storage (for testing/demo)
    - SQLite (for single-instance deployments)
    - A hosted document database (for production)
    """

    @abstractmethod
    def insert(self, record: dict) -> str:
        """
        Store a new invoice record and return its ID.

        Args:
            record: Extracted invoice data including upload metadata

        Returns:
            Invoice ID (unique identifier, assigned by the store)

        Raises:
            StoreError: if the backend cannot be reached
        """
        pass

    @abstractmethod
    def list_all(self) -> list:
        """
        List all invoices, newest upload first.

        Returns:
            List of invoice records, each including its "_id"
        """
        pass

    @abstractmethod
    def get_by_id(self, invoice_id: str) -> dict:
        """
        Get an invoice by ID.

        Raises:
            NotFound: if no invoice has this ID
        """
        pass

    @abstractmethod
    def delete_by_id(self, invoice_id: str) -> bool:
        """
        Delete an invoice by ID.

        Returns:
            True once the invoice is deleted

        Raises:
            NotFound: if no invoice has this ID
        """
        pass

    def search(self, query: str | None) -> list:
        """
        Find invoices whose vendor name, invoice number, or any line item
        description contains the query (case-insensitive).

        An empty or missing query returns every invoice, same as list_all().
        """
        if not query:
            return self.list_all()
        return [record for record in self.list_all() if matches_query(record, query)]

    def close(self) -> None:
        """Release any backend resources held by the store."""
        pass

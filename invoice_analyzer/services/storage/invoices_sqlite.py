"""
SQLite-based invoice store.

Invoices are kept as JSON documents, one row each, so the AI-shaped
fields are stored exactly as extracted. A single connection is opened
when the store is created and reused until close().
"""

import json
import sqlite3
import uuid
from loguru import logger
from .invoice_store_base import InvoiceStoreBase
from ...core.errors import NotFound, StoreError


class SQLiteInvoiceStore(InvoiceStoreBase):
    """
    SQLite-backed invoice store with persistent storage.

    Features:
    - Persistent storage across application restarts
    - Schemaless documents (JSON text column)
    - Indexed newest-first listing by upload date
    """

    def __init__(self, db_path: str = "invoices.db"):
        """
        Open the database and create the invoices table if needed.

        Args:
            db_path: Path to SQLite database file (default: invoices.db)
        """
        self.db_path = db_path
        try:
            # Shared across FastAPI's worker threads
            self._conn = sqlite3.connect(db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._init_database()
        except sqlite3.Error as e:
            raise StoreError(f"Could not open invoice database: {str(e)}") from e

    def _init_database(self):
        with self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS invoices (
                    id TEXT PRIMARY KEY,
                    data TEXT NOT NULL,
                    upload_date TEXT NOT NULL DEFAULT ''
                )
            """)
            self._conn.execute("""
                CREATE INDEX IF NOT EXISTS idx_upload_date
                ON invoices(upload_date)
            """)

    @staticmethod
    def _to_record(row: sqlite3.Row) -> dict:
        record = json.loads(row["data"])
        record["_id"] = row["id"]
        return record

    def insert(self, record: dict) -> str:
        """
        Store a new invoice and return its ID.

        Args:
            record: Invoice document; any "_id" key is replaced

        Returns:
            Invoice ID (UUID string)
        """
        invoice_id = str(uuid.uuid4())
        document = {k: v for k, v in record.items() if k != "_id"}
        try:
            with self._conn:
                self._conn.execute(
                    "INSERT INTO invoices (id, data, upload_date) VALUES (?, ?, ?)",
                    (invoice_id, json.dumps(document, default=str), str(record.get("uploadDate") or "")),
                )
        except sqlite3.Error as e:
            logger.error(f"Invoice insert failed: {str(e)}")
            raise StoreError(f"Failed to store invoice: {str(e)}") from e
        return invoice_id

    def list_all(self) -> list:
        """
        List all invoices ordered by upload date, newest first.

        Returns:
            List of invoice documents
        """
        try:
            rows = self._conn.execute("""
                SELECT id, data FROM invoices
                ORDER BY upload_date DESC, rowid DESC
            """).fetchall()
        except sqlite3.Error as e:
            logger.error(f"Invoice listing failed: {str(e)}")
            raise StoreError(f"Failed to list invoices: {str(e)}") from e
        return [self._to_record(row) for row in rows]

    def get_by_id(self, invoice_id: str) -> dict:
        try:
            row = self._conn.execute(
                "SELECT id, data FROM invoices WHERE id = ?", (invoice_id,)
            ).fetchone()
        except sqlite3.Error as e:
            logger.error(f"Invoice lookup failed: {str(e)}")
            raise StoreError(f"Failed to load invoice: {str(e)}") from e

        if row is None:
            raise NotFound()
        return self._to_record(row)

    def delete_by_id(self, invoice_id: str) -> bool:
        try:
            with self._conn:
                cursor = self._conn.execute("DELETE FROM invoices WHERE id = ?", (invoice_id,))
        except sqlite3.Error as e:
            logger.error(f"Invoice delete failed: {str(e)}")
            raise StoreError(f"Failed to delete invoice: {str(e)}") from e

        if cursor.rowcount == 0:
            raise NotFound()
        return True

    def close(self) -> None:
        self._conn.close()

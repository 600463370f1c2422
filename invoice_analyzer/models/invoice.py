from pydantic import BaseModel, Field

class LineItemView(BaseModel):
    description: str = "No description"
    quantity: str = "1"
    unit_price: str = "$0.00"
    amount: str = "$0.00"


class InvoiceView(BaseModel):
    """Display-safe values derived from a stored invoice record"""
    id: str | None = None
    vendor: str = "Unknown Vendor"
    invoice_number: str = "N/A"
    list_date: str = "No date"
    date: str = "Not specified"
    due_date: str = "Not specified"
    upload_date: str = "Invalid date"
    uploaded: str = "recently"
    amount: str = "N/A"
    subtotal: str = "$0.00"
    tax: str = "$0.00"
    total: str = "$0.00"
    payment_terms: str = "Not specified"
    notes: str = "No notes available"
    items: list[LineItemView] = Field(default_factory=list)

from typing import Literal

# Key names the rest of the service reads (search, review pages).
INVOICE_JSON_KEYS = """{
  "vendorName": "", "vendorAddress": "", "vendorContact": "",
  "invoiceNumber": "", "date": "", "dueDate": "",
  "items": [{"description": "", "quantity": "", "unitPrice": "", "amount": ""}],
  "subtotal": "", "taxAmount": "", "discount": "", "totalAmount": "",
  "paymentTerms": "", "notes": ""
}"""

PROMPT_TEMPLATE = """Extract ALL data from this {document} as JSON with:
- vendor details (name, address, contact)
- invoice number, date, due date
- ALL line items (description, quantity, unit price, amount)
- subtotal, taxes, discounts, total
- payment terms, notes
Use these keys, leaving out any field that is not on the invoice:
{keys}
Return ONLY valid JSON."""


def build_prompt(source: Literal["pdf", "image"]) -> str:
    """Build the extraction instruction for a PDF invoice or an invoice image"""
    document = "PDF invoice" if source == "pdf" else "invoice image"
    return PROMPT_TEMPLATE.format(document=document, keys=INVOICE_JSON_KEYS)

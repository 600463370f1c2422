"""
Browser review pages: a searchable invoice list with an upload form, and a
detail view with a delete action. Form posts redirect back to a page.

Every value shown comes from summarize_invoice() and is escaped with
sanitize() before it is embedded in markup.
"""

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import HTMLResponse, RedirectResponse
from loguru import logger
from .invoice import process_upload
from ..deps import get_store
from ...core.errors import InvoiceAnalyzerError, NotFound
from ...services.normalizer import sanitize, summarize_invoice
from ...services.storage import InvoiceStoreBase
from ...models.invoice import InvoiceView

router = APIRouter(tags=["review"])

PAGE = """
<html>
    <head><title>{title}</title></head>
    <body style="font-family: Arial; max-width: 900px; margin: 0 auto; padding: 30px;">
        {body}
    </body>
</html>
"""


def _message_page(title: str, message: str, status_code: int) -> HTMLResponse:
    body = f"<h2>{sanitize(title)}</h2><p>{sanitize(message)}</p><p><a href=\"/\">Back to invoices</a></p>"
    return HTMLResponse(PAGE.format(title=sanitize(title), body=body), status_code=status_code)


def _list_row(view: InvoiceView) -> str:
    return f"""
        <tr>
            <td><a href="/invoices/{sanitize(view.id)}/view">{sanitize(view.vendor)}</a></td>
            <td>{sanitize(view.invoice_number)}</td>
            <td>{sanitize(view.list_date)}</td>
            <td style="text-align: right;">{sanitize(view.amount)}</td>
            <td><small>{sanitize(view.uploaded)}</small></td>
        </tr>"""


@router.get("/", response_class=HTMLResponse)
def invoice_list_page(query: str | None = None, store: InvoiceStoreBase = Depends(get_store)):
    """List stored invoices, optionally filtered by a search query"""
    views = [summarize_invoice(record) for record in store.search(query)]

    if views:
        rows = "".join(_list_row(view) for view in views)
        listing = f"""
        <table style="width: 100%;">
            <tr><th>Vendor</th><th>Invoice #</th><th>Date</th><th>Amount</th><th>Uploaded</th></tr>
            {rows}
        </table>"""
    elif query:
        listing = f'<p>No invoices found matching "{sanitize(query)}"</p>'
    else:
        listing = "<p>No invoices found. Upload your first invoice to get started.</p>"

    body = f"""
        <h2>Invoices</h2>
        <form action="/invoices/upload" method="post" enctype="multipart/form-data">
            <input type="file" name="invoice" accept=".jpg,.jpeg,.png,.pdf">
            <button type="submit">Upload &amp; Analyze</button>
        </form>
        <form action="/" method="get">
            <input type="text" name="query" value="{sanitize(query)}" placeholder="Vendor, invoice # or item">
            <button type="submit">Search</button>
        </form>
        <hr>
        {listing}
    """
    return PAGE.format(title="Invoices", body=body)


@router.get("/invoices/{invoice_id}/view", response_class=HTMLResponse)
def invoice_detail_page(invoice_id: str, store: InvoiceStoreBase = Depends(get_store)):
    """Show one invoice with its amounts and line items"""
    try:
        view = summarize_invoice(store.get_by_id(invoice_id))
    except NotFound as e:
        return _message_page("Invoice not found", e.message, 404)

    if view.items:
        items = "".join(
            f"""
            <tr>
                <td>{sanitize(item.description)}</td>
                <td>{sanitize(item.quantity)}</td>
                <td style="text-align: right;">{sanitize(item.unit_price)}</td>
                <td style="text-align: right;">{sanitize(item.amount)}</td>
            </tr>"""
            for item in view.items
        )
    else:
        items = '<tr><td colspan="4" style="text-align: center;">No line items available</td></tr>'

    body = f"""
        <p><a href="/">&larr; Back to invoices</a></p>
        <h2>Invoice: {sanitize(view.invoice_number)}</h2>
        <p><strong>Vendor:</strong> {sanitize(view.vendor)}</p>
        <p><strong>Invoice Date:</strong> {sanitize(view.date)}</p>
        <p><strong>Due Date:</strong> {sanitize(view.due_date)}</p>
        <p><strong>Uploaded:</strong> {sanitize(view.upload_date)} ({sanitize(view.uploaded)})</p>
        <table style="width: 100%;">
            <tr><th>Description</th><th>Quantity</th><th>Unit Price</th><th>Amount</th></tr>
            {items}
        </table>
        <p><strong>Subtotal:</strong> {sanitize(view.subtotal)}</p>
        <p><strong>Tax:</strong> {sanitize(view.tax)}</p>
        <p><strong>Total:</strong> {sanitize(view.total)}</p>
        <hr>
        <p><strong>Payment Terms:</strong> {sanitize(view.payment_terms)}</p>
        <p><strong>Notes:</strong> {sanitize(view.notes)}</p>
        <form action="/invoices/{sanitize(view.id)}/delete" method="post">
            <button type="submit">Delete invoice</button>
        </form>
    """
    return PAGE.format(title=f"Invoice {sanitize(view.invoice_number)}", body=body)


@router.post("/invoices/upload")
async def upload_invoice_form(
    invoice: UploadFile | None = File(None),
    store: InvoiceStoreBase = Depends(get_store),
):
    """Upload from the list page, then show the new invoice"""
    try:
        invoice_id, _ = await process_upload(invoice, store)
    except InvoiceAnalyzerError as e:
        logger.warning("Invoice upload from review page failed", error=e.message)
        return _message_page("Upload failed", e.message, e.status_code)
    return RedirectResponse(url=f"/invoices/{invoice_id}/view", status_code=303)


@router.post("/invoices/{invoice_id}/delete")
def delete_invoice_form(invoice_id: str, store: InvoiceStoreBase = Depends(get_store)):
    try:
        store.delete_by_id(invoice_id)
    except NotFound as e:
        return _message_page("Invoice not found", e.message, 404)
    logger.info("Invoice deleted", invoice_id=invoice_id)
    return RedirectResponse(url="/", status_code=303)

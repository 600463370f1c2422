from pathlib import Path
from loguru import logger
from google import genai
from .content_extractor import extract_content
from .prompts import build_prompt
from .gemini import generate_invoice_json
from .response_parser import parse_invoice_json, merge_metadata


def extract_invoice_data(file_path: str, original_filename: str, client: genai.Client | None = None) -> dict:
    """
    Run a staged upload through extraction and return the record to store.

    file -> content -> prompt + Gemini -> JSON -> record with upload metadata
    """
    path = Path(file_path)
    content = extract_content(path, path.suffix)
    prompt = build_prompt(content.source)
    raw = generate_invoice_json(prompt, content, client=client)
    data = parse_invoice_json(raw)

    logger.info(
        "Extracted invoice data",
        file=original_filename,
        fields=len(data),
        invoice_number=data.get("invoiceNumber"),
    )
    return merge_metadata(data, original_filename, str(path))

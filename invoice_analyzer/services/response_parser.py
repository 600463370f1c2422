"""
Recovers the invoice JSON object from a free-form model reply.

Models often wrap the JSON in prose or markdown fences, so the object is
located by bracket-scanning: the span from the first "{" to the last "}".
Braces inside string values outside that span will widen it; such replies
fail as malformed rather than being repaired.
"""

import json
import math
from datetime import datetime, UTC
from loguru import logger
from ..core.errors import MalformedResponseError

SYSTEM_FIELDS = ("originalFilename", "filePath", "uploadDate")


def _reject_constant(name: str):
    # NaN and Infinity are not JSON and cannot be served back by the API
    raise ValueError(f"unsupported JSON constant {name}")


def _finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise ValueError(f"number out of range: {literal[:20]}")
    return value


def parse_invoice_json(raw: str) -> dict:
    """
    Parse the JSON object embedded in a model reply.

    Args:
        raw: Raw reply text

    Returns:
        The decoded JSON object

    Raises:
        MalformedResponseError: no "{...}" span, invalid JSON, or not an object
    """
    text = raw or ""
    start = text.find("{")
    if start == -1:
        logger.warning("Model reply contains no JSON object", preview=text[:200])
        raise MalformedResponseError("AI response did not contain a JSON object")

    end = text.rfind("}")
    if end < start:
        logger.warning("Model reply has an unterminated JSON object", preview=text[:200])
        raise MalformedResponseError("AI response contained an unterminated JSON object")

    try:
        data = json.loads(text[start:end + 1], parse_constant=_reject_constant, parse_float=_finite_float)
    except json.JSONDecodeError as e:
        logger.warning("Model reply is not valid JSON", error=str(e), preview=text[:200])
        raise MalformedResponseError(f"AI response was not valid JSON: {e.msg}") from e
    except (ValueError, RecursionError) as e:
        # Non-standard constants, integers past the digit limit, runaway nesting
        logger.warning("Model reply has unsupported JSON values", error=str(e), preview=text[:200])
        raise MalformedResponseError(f"AI response was not valid JSON: {str(e)}") from e

    if not isinstance(data, dict):
        raise MalformedResponseError("AI response JSON was not an object")
    return data


def merge_metadata(data: dict, original_filename: str, file_path: str, now: datetime | None = None) -> dict:
    """
    Attach upload metadata to extracted invoice data.

    System fields always overwrite same-named keys the model returned, and a
    model-supplied "_id" is dropped so the store assigns identity.
    """
    record = {k: v for k, v in data.items() if k != "_id"}
    record["originalFilename"] = original_filename
    record["filePath"] = file_path
    record["uploadDate"] = (now or datetime.now(UTC)).isoformat()
    return record

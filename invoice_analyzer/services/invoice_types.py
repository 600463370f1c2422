from typing import Literal
from pydantic import BaseModel

class ExtractedContent(BaseModel):
    kind: Literal["text", "image"]
    text: str | None = None  # Full PDF text (kind == "text")
    data: str | None = None  # Base64 image payload (kind == "image")
    mime_type: str | None = None

    @property
    def source(self) -> Literal["pdf", "image"]:
        return "pdf" if self.kind == "text" else "image"

    @property
    def size(self) -> int:
        return len(self.text or self.data or "")

"""
Google Document AI response adapter.

Reads a Form Parser style response and materialises it as an
ExtractionResult.  The payload may be the bare ``document`` object, a
``{"document": ...}`` wrapper or the ``outputs.documentAI`` envelope.
Text for field names, values and entities is resolved through text
anchors into the document's full text, falling back to ``mentionText`` /
``content``.

No network or file I/O happens here.
"""

from __future__ import annotations

from typing import Any, Mapping

from vesselscan.core.logging import get_logger
from vesselscan.pipeline.errors import ExtractionError
from vesselscan.processing.extractors.base import BaseExtractor
from vesselscan.processing.models import ExtractionResult, ProviderEntity

logger = get_logger(__name__)


def _as_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def text_from_anchor(full_text: str, anchor: Mapping[str, Any] | None) -> str | None:
    """Concatenate every text segment an anchor points at, or None."""
    if not anchor or not full_text:
        return None
    segments = anchor.get("textSegments") or []
    if not segments:
        return None
    pieces = []
    for segment in segments:
        start = _as_int(segment.get("startIndex"), 0)
        end = _as_int(segment.get("endIndex"), len(full_text))
        pieces.append(full_text[start:end])
    return "".join(pieces).strip()


def _layout_text(full_text: str, layout: Mapping[str, Any] | None) -> str | None:
    if not layout:
        return None
    text = text_from_anchor(full_text, layout.get("textAnchor"))
    if text:
        return text
    fallback = layout.get("content") or layout.get("mentionText")
    return fallback.strip() if isinstance(fallback, str) else None


class DocumentAIExtractor(BaseExtractor):
    """Extract form fields, entities and page text from a Document AI response."""

    def supports_format(self, format_type: str) -> bool:
        return format_type.lower() in ("document_ai", "documentai", "google_document_ai")

    def extract(self, payload: dict[str, Any]) -> ExtractionResult:
        document = self._unwrap(payload)
        full_text = document.get("text") or ""

        form_fields: dict[str, str] = {}
        for page in document.get("pages") or []:
            for field in page.get("formFields") or []:
                name = _layout_text(full_text, field.get("fieldName"))
                value = _layout_text(full_text, field.get("fieldValue"))
                if not name or not value:
                    continue
                form_fields.setdefault(name, value)

        entities: list[ProviderEntity] = []
        for entity in document.get("entities") or []:
            value = text_from_anchor(full_text, entity.get("textAnchor")) or entity.get("mentionText") or ""
            entities.append(ProviderEntity(
                type=entity.get("type") or "unknown",
                value=str(value).strip(),
                confidence=min(max(float(entity.get("confidence") or 0.0), 0.0), 1.0),
            ))

        logger.info(
            "Document AI response extracted",
            form_fields=len(form_fields),
            entities=len(entities),
            text_length=len(full_text),
        )
        return ExtractionResult(
            form_fields=form_fields,
            entities=entities,
            text_content=full_text,
        )

    @staticmethod
    def _unwrap(payload: Any) -> Mapping[str, Any]:
        if not isinstance(payload, Mapping):
            raise ExtractionError(
                "Document AI payload must be a JSON object",
                details={"type": type(payload).__name__},
            )
        outputs = payload.get("outputs")
        if isinstance(outputs, Mapping):
            payload = outputs.get("documentAI") or outputs.get("documentAi") or {}
        document = payload.get("document", payload) if isinstance(payload, Mapping) else None
        if not isinstance(document, Mapping):
            raise ExtractionError("Document AI payload has no document object")
        return document

"""
Abstract base class for all extractors.
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from vesselscan.processing.models import ExtractionResult


class BaseExtractor(ABC):
    """Base interface for provider payload extractors."""

    @abstractmethod
    def extract(self, payload: dict[str, Any]) -> ExtractionResult:
        """Turn one provider response into an ExtractionResult."""
        ...

    @abstractmethod
    def supports_format(self, format_type: str) -> bool:
        """Return True if this extractor handles the given payload format."""
        ...

    def extract_file(self, filepath: str | Path) -> ExtractionResult:
        """Read a JSON provider response from disk and extract it."""
        with open(filepath, encoding="utf-8") as fh:
            return self.extract(json.load(fh))

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
BACKEND_DIR = PROJECT_ROOT / "backend"
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))


from vesselscan.pipeline import CanonicalizationEngine  # noqa: E402
from vesselscan.processing.models import ExtractionResult  # noqa: E402


@pytest.fixture(scope="session")
def engine() -> CanonicalizationEngine:
    """One engine shared by all tests; it keeps no per-call state."""
    return CanonicalizationEngine()


@pytest.fixture
def make_extraction() -> Callable[..., ExtractionResult]:
    """Factory for ExtractionResult with sensible empty defaults."""

    def _make(
        form_fields: dict[str, Any] | None = None,
        entities: list[dict[str, Any]] | None = None,
        text_content: str = "",
    ) -> ExtractionResult:
        return ExtractionResult(
            form_fields=form_fields or {},
            entities=entities or [],
            text_content=text_content,
        )

    return _make

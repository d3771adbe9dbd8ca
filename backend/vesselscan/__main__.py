"""
vesselscan command line.

Usage: python -m vesselscan <command> [options]
"""

from __future__ import annotations

import json
import sys

from vesselscan.core.config import settings
from vesselscan.core.logging import get_logger, setup_logging

logger = get_logger("vesselscan.cli")

USAGE = """
vesselscan — canonicalize vessel registration scans

Commands:
    canonicalize <extraction.json>   Canonicalize one provider extraction
    rules                            List the mapping rule table

Options:
    --previous=FILE     Merge with a record from an earlier scan (JSON object)
    --format=FORMAT     Input format: extraction (default) or document_ai
    --document-ai       Same as --format=document_ai
    --json-logs         Emit logs as JSON lines on stderr
    --log-level=LEVEL   Override LOG_LEVEL

Examples:
    python -m vesselscan canonicalize scan.json
    python -m vesselscan canonicalize docai.json --document-ai --previous=record.json
"""


def _option(opts: list[str], name: str) -> str | None:
    prefix = f"--{name}="
    for opt in opts:
        if opt.startswith(prefix):
            return opt[len(prefix):]
    return None


def _load_json(path: str) -> object:
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


def _extractor_for(format_type: str):
    from vesselscan.processing.extractors.document_ai import DocumentAIExtractor

    for extractor in (DocumentAIExtractor(),):
        if extractor.supports_format(format_type):
            return extractor
    return None


def canonicalize(path: str, opts: list[str]) -> int:
    from vesselscan.pipeline import CanonicalizationEngine
    from vesselscan.processing.models import ExtractionResult

    format_type = _option(opts, "format") or ("document_ai" if "--document-ai" in opts else "extraction")
    if format_type == "extraction":
        extraction = ExtractionResult.model_validate(_load_json(path))
    else:
        extractor = _extractor_for(format_type)
        if extractor is None:
            logger.error("Unsupported input format", format=format_type)
            return 1
        extraction = extractor.extract_file(path)

    previous = None
    previous_path = _option(opts, "previous")
    if previous_path:
        previous = _load_json(previous_path)
        if not isinstance(previous, dict):
            logger.error("Previous record must be a JSON object", path=previous_path)
            return 1

    result = CanonicalizationEngine().canonicalize(extraction, previous_record=previous)
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False, default=str))
    return 0


def list_rules() -> int:
    from vesselscan.processing.rules import RULE_TABLE

    for rule in RULE_TABLE:
        target = f"{rule.canonical_key} ({rule.composite})" if rule.composite else rule.canonical_key
        print(f"{rule.describe():<36} {str(rule.kind):<10} → {target}")
    return 0


def main(argv: list[str] | None = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    if not args or args[0] in ("-h", "--help"):
        print(USAGE)
        return 0

    command, opts = args[0], args[1:]
    setup_logging(
        _option(opts, "log-level") or settings.LOG_LEVEL,
        json_output="--json-logs" in opts or settings.LOG_JSON,
    )

    try:
        if command == "canonicalize":
            positional = [o for o in opts if not o.startswith("--")]
            if len(positional) != 1:
                logger.error("canonicalize expects exactly one input file")
                print(USAGE)
                return 1
            return canonicalize(positional[0], opts)
        if command == "rules":
            return list_rules()
        logger.error(f"Unknown command: {command}")
        print(USAGE)
        return 1
    except Exception as exc:
        logger.error(f"Operation failed: {exc}")
        return 1


if __name__ == "__main__":
    sys.exit(main())

#!/usr/bin/env python3
"""
Demo script — run the canonicalization engine locally on sample scans.

Shows a registry certificate scan, a rescan merged with the first
record, and how rejected boilerplate falls back to page text.

Usage:
    cd backend
    python -m scripts.demo_canonicalize
"""

import os
import sys

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


CERTIFICATE_TEXT = """REPUBLIC OF MALTA
CERTIFICATE OF REGISTRY
Name of Ship: STARK X
Official No. 12345
Call Sign: 9HA1234
Port of Registry: VALLETTA
This certificate issued in terms of Article 12 of the Merchant Shipping Act
Certificate No. 8812
"""


def run_certificate_scan():
    """DEMO 1: Registry certificate form fields + page text."""
    from vesselscan.pipeline import CanonicalizationEngine

    print("\n" + "=" * 70)
    print("  DEMO 1: Registry certificate scan")
    print("=" * 70)

    engine = CanonicalizationEngine()
    result = engine.canonicalize({
        "form_fields": {
            "Name_o_fShip": "STARK",
            "When_and_Where_Built": "2025 AZIMUT BENETTI SPA, VIAREGGIO (LUCCA), ITALY",
            "Callsign": "9hA123",
            "Certificate_No": "This certificate issued in terms of Article 12",
            "No, Year and Home Port": "525 IN 2025\nVALLETTA",
            "Length_overall": "35,5 m",
            "Particulars_of_Tonnage": "199 / 59",
            "Number_and_Description_of_Engines": "Two diesel engines, Combined KW 2864",
            "Registered_on": "10 December 2020",
        },
        "entities": [{"type": "vessel_name", "value": "STARK", "confidence": 0.9}],
        "text_content": CERTIFICATE_TEXT,
    })
    _print_result(result)
    return engine, result


def run_rescan(engine, previous):
    """DEMO 2: A second scan of the same vessel merged with the first record."""
    print("\n" + "=" * 70)
    print("  DEMO 2: Rescan merged with previous record")
    print("=" * 70)

    result = engine.canonicalize(
        {
            "form_fields": {
                "Name of Ship": "SOMETHING ELSE",
                "Models": "m2, m3",
                "Main_breadth": "7.2",
            },
        },
        previous_record={**previous.record, "discovered_models": ["m1", "m2"]},
    )
    _print_result(result)


def _print_result(result):
    print(f"\n  Execution : {result.execution_id}")
    print(f"  Document  : {result.document_type}")
    print(f"  Confidence: {result.confidence:.2f}")

    print(f"\n  Record ({len(result.record)} fields):")
    for key, value in sorted(result.record.items()):
        source = result.provenance.get(key, {}).get("source", "previous")
        print(f"    {key:<28} {value!r:<36} [{source}]")

    if result.rejected:
        print(f"\n  Rejected:")
        for r in result.rejected:
            print(f"    ✗ {r['canonical_key']}: {r['value']!r} ({r['reason']})")

    if result.missing_keys:
        print(f"\n  Missing: {', '.join(result.missing_keys)}")

    print(f"\n  Steps:")
    for sr in result.step_results:
        icon = {"COMPLETED": "✓", "SKIPPED": "⊘"}.get(sr["status"], "✗")
        print(f"    {icon} {sr['step_name']:<22} {sr['duration_ms']}ms  {sr['metadata']}")

    print(f"{'─' * 50}\n")


def main():
    from vesselscan.core.logging import setup_logging
    setup_logging("WARNING")     # quiet logs, show formatted output only

    print("\n╔" + "═" * 68 + "╗")
    print("║        VESSELSCAN — CANONICALIZATION ENGINE DEMO                   ║")
    print("╚" + "═" * 68 + "╝")

    engine, first = run_certificate_scan()
    run_rescan(engine, first)

    print("\n✅ All demos completed successfully!\n")


if __name__ == "__main__":
    main()

"""Tests for the Document AI response adapter."""

import json

import pytest

from vesselscan.pipeline.errors import ExtractionError
from vesselscan.processing.extractors.document_ai import DocumentAIExtractor, text_from_anchor

FULL_TEXT = "Name of Ship\nSTARK\nCallsign\n9hA123\n"


def _anchor(start, end):
    return {"textSegments": [{"startIndex": str(start), "endIndex": str(end)}]}


@pytest.fixture
def document():
    return {
        "text": FULL_TEXT,
        "pages": [
            {
                "formFields": [
                    {
                        "fieldName": {"textAnchor": _anchor(0, 12)},
                        "fieldValue": {"textAnchor": _anchor(13, 18)},
                    },
                    {
                        "fieldName": {"content": "Callsign"},
                        "fieldValue": {"textAnchor": _anchor(28, 34)},
                    },
                    {
                        "fieldName": {"content": "Stamp"},
                        "fieldValue": {},
                    },
                ],
            },
            {
                "formFields": [
                    {
                        "fieldName": {"content": "Name of Ship"},
                        "fieldValue": {"content": "IGNORED"},
                    },
                ],
            },
        ],
        "entities": [
            {"type": "vessel_name", "mentionText": "STARK", "confidence": 0.93},
            {"type": "call_sign", "textAnchor": _anchor(28, 34), "confidence": 1.5},
        ],
    }


class TestTextFromAnchor:

    def test_missing_start_index_means_zero(self):
        assert text_from_anchor("Hello world", {"textSegments": [{"endIndex": "5"}]}) == "Hello"

    def test_segments_are_joined(self):
        anchor = {"textSegments": [
            {"startIndex": "0", "endIndex": "5"},
            {"startIndex": "5", "endIndex": "11"},
        ]}
        assert text_from_anchor("Hello world", anchor) == "Hello world"

    def test_empty_anchor(self):
        assert text_from_anchor("Hello", None) is None
        assert text_from_anchor("Hello", {"textSegments": []}) is None


class TestDocumentAIExtractor:

    def test_form_fields(self, document):
        result = DocumentAIExtractor().extract(document)
        assert result.form_fields == {"Name of Ship": "STARK", "Callsign": "9hA123"}
        assert result.text_content == FULL_TEXT

    def test_entities(self, document):
        result = DocumentAIExtractor().extract(document)
        assert [(e.type, e.value) for e in result.entities] == [
            ("vessel_name", "STARK"),
            ("call_sign", "9hA123"),
        ]
        assert result.entities[1].confidence == 1.0

    @pytest.mark.parametrize("wrap", [
        lambda doc: doc,
        lambda doc: {"document": doc},
        lambda doc: {"outputs": {"documentAI": {"document": doc}}},
    ])
    def test_envelopes(self, document, wrap):
        result = DocumentAIExtractor().extract(wrap(document))
        assert result.form_fields["Callsign"] == "9hA123"

    @pytest.mark.parametrize("payload", [[1, 2], "text", {"document": "not an object"}])
    def test_bad_payload(self, payload):
        with pytest.raises(ExtractionError):
            DocumentAIExtractor().extract(payload)

    def test_supports_format(self):
        extractor = DocumentAIExtractor()
        assert extractor.supports_format("Document_AI")
        assert not extractor.supports_format("csv")

    def test_extract_file(self, document, tmp_path):
        path = tmp_path / "docai.json"
        path.write_text(json.dumps({"document": document}), encoding="utf-8")
        result = DocumentAIExtractor().extract_file(path)
        assert result.form_fields["Name of Ship"] == "STARK"

    def test_end_to_end(self, document, engine):
        extraction = DocumentAIExtractor().extract(document)
        result = engine.canonicalize(extraction)
        assert result.record["yacht_name"] == "STARK"
        assert result.record["call_sign"] == "9HA123"
        assert result.provenance["yacht_name"]["raw_source_field"] == "Name of Ship"

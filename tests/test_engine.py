"""End-to-end tests for the canonicalization engine."""

import json

import pytest

from vesselscan.__main__ import main
from vesselscan.core.constants import DocumentType, StepStatus
from vesselscan.pipeline import CanonicalizationEngine, detect_document_type
from vesselscan.pipeline.context import CanonicalizationContext, StepResult
from vesselscan.pipeline.errors import StepExecutionError
from vesselscan.pipeline.step import CanonicalizationStep
from vesselscan.processing.models import ProviderEntity


class TestScenarios:

    def test_certificate_name_field(self, engine, make_extraction):
        result = engine.canonicalize(make_extraction(form_fields={"Name_o_fShip": "STARK"}))
        assert result.record == {"yacht_name": "STARK"}

    def test_builder_and_year(self, engine, make_extraction):
        result = engine.canonicalize(make_extraction(form_fields={
            "When_and_Where_Built": "2025 AZIMUT BENETTI SPA, VIAREGGIO (LUCCA), ITALY",
        }))
        assert result.record["year_built"] == 2025
        assert result.record["builder"] == "AZIMUT BENETTI SPA"

    def test_call_sign_uppercased(self, engine, make_extraction):
        result = engine.canonicalize(make_extraction(form_fields={"Callsign": "9hA123"}))
        assert result.record["call_sign"] == "9HA123"

    def test_boilerplate_certificate_number_is_rejected(self, engine, make_extraction):
        boilerplate = "This certificate issued in terms of Article 12"
        result = engine.canonicalize(make_extraction(
            form_fields={"Certificate_No": boilerplate},
            text_content=boilerplate,
        ))
        assert "certificate_number" not in result.record
        assert result.rejected[0]["canonical_key"] == "certificate_number"
        assert result.rejected[0]["reason"] == "boilerplate"
        assert "certificate_number" in result.fallback_attempted

    def test_model_lists_are_unioned_across_scans(self, engine, make_extraction):
        first = engine.canonicalize(make_extraction(form_fields={"Models": "m1, m2"}))
        second = engine.canonicalize(
            make_extraction(form_fields={"Models": "m2; m3"}),
            previous_record=first.record,
        )
        assert second.record["discovered_models"] == ["m1", "m2", "m3"]

    def test_empty_extraction(self, engine, make_extraction):
        result = engine.canonicalize(make_extraction())
        assert result.record == {}
        assert result.confidence == 0.5
        assert result.empty
        statuses = [sr["status"] for sr in result.step_results]
        assert statuses[-1] == StepStatus.COMPLETED
        assert statuses[:-1] == [StepStatus.SKIPPED] * 4


class TestConflicts:

    def test_form_field_beats_entity(self, engine, make_extraction):
        result = engine.canonicalize(make_extraction(
            form_fields={"Callsign": "9HA123"},
            entities=[{"type": "call_sign", "value": "9HB999", "confidence": 0.99}],
        ))
        assert result.record["call_sign"] == "9HA123"
        assert result.provenance["call_sign"]["origin"] == "form_field"

    def test_rejected_form_value_falls_through_to_entity(self, engine, make_extraction):
        result = engine.canonicalize(make_extraction(
            form_fields={"Callsign": "9H"},
            entities=[{"type": "call_sign", "value": "9HB999", "confidence": 0.99}],
        ))
        assert result.record["call_sign"] == "9HB999"
        assert result.provenance["call_sign"]["origin"] == "entity"
        assert [r["value"] for r in result.rejected] == ["9H"]

    def test_exact_field_beats_fuzzy_field(self, engine, make_extraction):
        result = engine.canonicalize(make_extraction(form_fields={
            "Registered name of ship": "OTHER",
            "Name_o_fShip": "STARK",
        }))
        assert result.record["yacht_name"] == "STARK"
        assert result.provenance["yacht_name"]["match"] == "exact"


class TestTextFallback:

    def test_fallback_fills_unset_key(self, engine, make_extraction):
        result = engine.canonicalize(make_extraction(text_content="Call Sign: 9HA123\n"))
        assert result.record["call_sign"] == "9HA123"
        assert result.provenance["call_sign"]["source"] == "text_fallback"

    def test_fallback_never_overrides(self, engine, make_extraction):
        result = engine.canonicalize(make_extraction(
            form_fields={"Name_o_fShip": "STARK"},
            text_content="Name of Ship: OTHER NAME\n",
        ))
        assert result.record["yacht_name"] == "STARK"
        assert "yacht_name" not in result.fallback_attempted

    def test_certificate_text(self, engine, make_extraction):
        text = (
            "CERTIFICATE OF REGISTRY\n"
            "Name of Ship: STARK X\n"
            "Official No. 12345\n"
            "Port of Registry: VALLETTA\n"
            "Certificate No. 8812\n"
        )
        result = engine.canonicalize(make_extraction(text_content=text))
        assert result.record == {
            "certificate_number": "8812",
            "official_number": "12345",
            "yacht_name": "STARK X",
            "flag_state": "MALTA",
            "home_port": "VALLETTA",
        }


class TestNameInference:

    LABELLED_TEXT = "Name of Ship: STARK X\n"

    def test_bare_name_label_builds_the_name(self, engine, make_extraction):
        result = engine.canonicalize(make_extraction(form_fields={"STARK": "X"}))
        assert result.record == {"yacht_name": "STARK X"}
        assert result.provenance["yacht_name"]["match"] == "inferred"

    def test_unrelated_labels_leave_the_name_to_the_text(self, engine, make_extraction):
        result = engine.canonicalize(make_extraction(
            form_fields={"Tel": "21234567", "Remarks": "NIL"},
            text_content=self.LABELLED_TEXT,
        ))
        assert result.record == {"yacht_name": "STARK X"}
        assert result.provenance["yacht_name"]["source"] == "text_fallback"
        assert "yacht_name" in result.fallback_attempted

    def test_entity_type_is_not_a_name(self, engine, make_extraction):
        result = engine.canonicalize(make_extraction(
            entities=[{"type": "location", "value": "Malta", "confidence": 0.9}],
            text_content=self.LABELLED_TEXT,
        ))
        assert result.record == {"yacht_name": "STARK X"}

    def test_labelled_text_name_beats_inferred_name(self, engine, make_extraction):
        result = engine.canonicalize(make_extraction(
            form_fields={"Aurora": "II"},
            text_content=self.LABELLED_TEXT,
        ))
        assert result.record["yacht_name"] == "STARK X"
        assert result.provenance["yacht_name"]["source"] == "text_fallback"


class TestNoisyEntities:

    def test_null_entity_value_is_ignored(self, engine, make_extraction):
        result = engine.canonicalize(make_extraction(
            form_fields={"Callsign": "9hA123"},
            entities=[{"type": "org", "value": None, "confidence": 0.8}],
        ))
        assert result.record == {"call_sign": "9HA123"}
        assert result.notes == ["1 field(s) with an empty name or value ignored"]

    def test_percentage_confidence_is_accepted(self, engine):
        result = engine.canonicalize({
            "entities": [{"type": "call_sign", "value": "9HA123", "confidence": 95}],
        })
        assert result.record == {"call_sign": "9HA123"}

    @pytest.mark.parametrize("raw,expected", [
        (0.42, 0.42),
        (95, 0.95),
        (250, 1.0),
        (-3, 0.0),
        ("0.7", 0.7),
        ("high", 0.0),
        (None, 0.0),
    ])
    def test_confidence_is_coerced(self, raw, expected):
        entity = ProviderEntity(type="call_sign", value="9HA123", confidence=raw)
        assert entity.confidence == pytest.approx(expected)

    def test_entity_fields_are_stringified(self):
        entity = ProviderEntity(type=None, value=12345)
        assert (entity.type, entity.value) == ("", "12345")


class TestPreviousRecord:

    def test_previous_scalar_wins(self, engine, make_extraction):
        result = engine.canonicalize(
            make_extraction(form_fields={"Name_o_fShip": "STARK", "Callsign": "9HA123"}),
            previous_record={"yacht_name": "STARK X"},
        )
        assert result.record["yacht_name"] == "STARK X"
        assert result.record["call_sign"] == "9HA123"
        assert "yacht_name" not in result.provenance

    def test_previous_record_is_not_mutated(self, engine, make_extraction):
        previous = {"discovered_models": ["m1"]}
        engine.canonicalize(make_extraction(form_fields={"Models": "m2"}), previous_record=previous)
        assert previous == {"discovered_models": ["m1"]}


class TestEngineBehaviour:

    def test_engine_keeps_no_state_between_calls(self, engine, make_extraction):
        extraction = make_extraction(form_fields={"Callsign": "9hA123"})
        first = engine.canonicalize(extraction)
        second = engine.canonicalize(extraction)
        assert first.record == second.record
        assert first.execution_id != second.execution_id

    def test_mapping_input_is_accepted(self, engine):
        result = engine.canonicalize({"form_fields": {"Callsign": "9hA123"}})
        assert result.record == {"call_sign": "9HA123"}

    def test_missing_keys_and_suggestions(self, engine, make_extraction):
        result = engine.canonicalize(make_extraction(form_fields={"Name_o_fShip": "STARK"}))
        assert "yacht_name" not in result.missing_keys
        assert "call_sign" in result.missing_keys
        assert result.suggestions[0] == "Extracted 1 form fields ready for auto-population"

    def test_empty_fields_are_noted(self, engine, make_extraction):
        result = engine.canonicalize(make_extraction(form_fields={"Callsign": "9hA123", "Stamp": None}))
        assert result.record == {"call_sign": "9HA123"}
        assert result.notes == ["1 field(s) with an empty name or value ignored"]

    def test_result_is_json_serialisable(self, engine, make_extraction):
        result = engine.canonicalize(make_extraction(form_fields={"Callsign": "9hA123"}))
        assert json.loads(json.dumps(result.to_dict()))["record"] == {"call_sign": "9HA123"}

    def test_failing_step_raises_step_execution_error(self):

        class BrokenStep(CanonicalizationStep):
            name = "broken"
            description = "Always fails"

            def execute(self, ctx: CanonicalizationContext) -> StepResult:
                raise ValueError("boom")

        engine = CanonicalizationEngine(steps=[BrokenStep()])
        with pytest.raises(StepExecutionError) as exc_info:
            engine.canonicalize({})
        assert exc_info.value.step_name == "broken"
        assert isinstance(exc_info.value.__cause__, ValueError)


class TestDocumentType:

    @pytest.mark.parametrize("text,expected", [
        ("Yacht registration certificate", DocumentType.YACHT_REGISTRATION),
        ("Insurance policy schedule", DocumentType.INSURANCE_CERTIFICATE),
        ("Certificate of competency", DocumentType.CREW_LICENSE),
        ("", DocumentType.AUTO_DETECT),
    ])
    def test_detect(self, text, expected):
        assert detect_document_type(text) == expected


class TestCli:

    def test_canonicalize_command(self, tmp_path, capsys):
        scan = tmp_path / "scan.json"
        scan.write_text(json.dumps({"form_fields": {"Callsign": "9hA123"}}), encoding="utf-8")
        previous = tmp_path / "previous.json"
        previous.write_text(json.dumps({"yacht_name": "STARK X"}), encoding="utf-8")

        code = main(["canonicalize", str(scan), f"--previous={previous}", "--log-level=WARNING"])

        assert code == 0
        output = json.loads(capsys.readouterr().out)
        assert output["record"] == {"yacht_name": "STARK X", "call_sign": "9HA123"}

    def test_document_ai_format(self, tmp_path, capsys):
        text = "Callsign\n9hA123\n"
        response = {"document": {
            "text": text,
            "pages": [{"formFields": [{
                "fieldName": {"content": "Callsign"},
                "fieldValue": {"content": "9hA123"},
            }]}],
        }}
        scan = tmp_path / "docai.json"
        scan.write_text(json.dumps(response), encoding="utf-8")

        code = main(["canonicalize", str(scan), "--format=Document_AI", "--log-level=WARNING"])

        assert code == 0
        assert json.loads(capsys.readouterr().out)["record"]["call_sign"] == "9HA123"

    def test_unsupported_format(self, tmp_path):
        scan = tmp_path / "scan.csv"
        scan.write_text("Callsign,9hA123\n", encoding="utf-8")
        assert main(["canonicalize", str(scan), "--format=csv", "--log-level=WARNING"]) == 1

    def test_rules_command(self, capsys):
        assert main(["rules", "--log-level=WARNING"]) == 0
        assert "call_sign" in capsys.readouterr().out

    def test_unknown_command(self):
        assert main(["frobnicate", "--log-level=WARNING"]) == 1

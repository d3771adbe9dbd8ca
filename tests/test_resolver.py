"""Tests for record merging and the confidence heuristic."""

import copy

import pytest

from vesselscan.core.config import settings
from vesselscan.processing.models import ExtractionResult
from vesselscan.processing.resolver import merge_lists, merge_records, resolve
from vesselscan.validation.confidence_scorer import score_confidence


class TestMergeLists:

    def test_ordered_union(self):
        assert merge_lists(["m1", "m2"], ["m2", "m3"]) == ["m1", "m2", "m3"]

    def test_none_is_skipped(self):
        assert merge_lists(None, ["m1"], None) == ["m1"]


class TestMergeRecords:

    def test_no_previous_returns_copy(self):
        fresh = {"yacht_name": "STARK X", "discovered_models": ["m1"]}
        merged = merge_records(fresh)
        assert merged == fresh
        merged["discovered_models"].append("m2")
        assert fresh["discovered_models"] == ["m1"]

    def test_previous_scalar_wins(self):
        merged = merge_records({"yacht_name": "STARK"}, {"yacht_name": "STARK X"})
        assert merged["yacht_name"] == "STARK X"

    def test_fresh_fills_gaps(self):
        merged = merge_records({"call_sign": "9HA123"}, {"yacht_name": "STARK X"})
        assert merged == {"yacht_name": "STARK X", "call_sign": "9HA123"}

    def test_list_union_previous_first(self):
        merged = merge_records(
            {"discovered_models": ["m2", "m3"]},
            {"discovered_models": ["m1", "m2"]},
        )
        assert merged["discovered_models"] == ["m1", "m2", "m3"]

    def test_previous_only_list_is_kept(self):
        merged = merge_records({"yacht_name": "STARK X"}, {"discovered_models": ["m1"]})
        assert merged["discovered_models"] == ["m1"]

    def test_inputs_are_not_mutated(self):
        fresh = {"yacht_name": "STARK", "discovered_models": ["m2"]}
        previous = {"yacht_name": "STARK X", "discovered_models": ["m1"]}
        fresh_before, previous_before = copy.deepcopy(fresh), copy.deepcopy(previous)
        merge_records(fresh, previous)
        assert fresh == fresh_before
        assert previous == previous_before

    def test_merge_is_idempotent(self):
        previous = {"yacht_name": "STARK X", "discovered_models": ["m1"]}
        fresh = {"yacht_name": "STARK", "call_sign": "9HA123", "discovered_models": ["m2"]}
        once = merge_records(fresh, previous)
        assert merge_records(fresh, once) == once


class TestResolve:

    def test_empty_extraction(self):
        record, confidence = resolve(ExtractionResult(), {})
        assert record == {}
        assert confidence == 0.5

    def test_record_and_confidence(self):
        extraction = ExtractionResult(form_fields={"Callsign": "9HA123"})
        record, confidence = resolve(extraction, {"call_sign": "9HA123"}, {"yacht_name": "STARK X"})
        assert record == {"yacht_name": "STARK X", "call_sign": "9HA123"}
        assert confidence == 0.7


class TestScoreConfidence:

    @pytest.mark.parametrize("kwargs,expected", [
        ({}, 0.5),
        ({"text_content": "x" * 101}, 0.7),
        ({"form_fields": {"a": "b"}}, 0.7),
        ({"entities": [{"type": "a", "value": "b", "confidence": 0.9}]}, 0.6),
        ({
            "text_content": "x" * 200,
            "form_fields": {"a": "b"},
            "entities": [{"type": "a", "value": "b"}],
        }, 1.0),
    ])
    def test_formula(self, kwargs, expected):
        assert score_confidence(ExtractionResult(**kwargs)) == expected

    def test_text_at_threshold_earns_no_bonus(self):
        assert score_confidence(ExtractionResult(text_content="x" * 100)) == 0.5

    def test_weights_come_from_settings(self, monkeypatch):
        monkeypatch.setattr(settings, "CONFIDENCE_BASE", 0.3)
        assert score_confidence(ExtractionResult(form_fields={"a": "b"})) == 0.5

"""Tests for value transforms."""

import pytest

from vesselscan.processing import transforms


class TestNumbers:

    @pytest.mark.parametrize("raw,expected", [
        ("35,5 m", 35.5),
        ("LOA 35.50m", 35.5),
        ("1,234.5 GT", 1234.5),
        ("7", 7.0),
    ])
    def test_extract_number(self, raw, expected):
        assert transforms.extract_number(raw) == expected

    def test_extract_number_without_digits(self):
        assert transforms.extract_number("n/a") is None

    def test_extract_numbers_in_order(self):
        assert transforms.extract_numbers("Gross 199 / Net 59.5") == [199.0, 59.5]

    def test_combined_kw_is_preferred(self):
        assert transforms.extract_power_kw("2 engines 1432 each, Combined KW 2864") == 2864.0

    def test_kw_with_thousands_separator(self):
        assert transforms.extract_power_kw("2 x 1,939 kW") == 1939.0

    def test_horsepower_is_converted(self):
        assert transforms.extract_power_kw("1000 HP") == 745.7

    def test_extract_year(self):
        assert transforms.extract_year("Built 2019 at Viareggio") == 2019
        assert transforms.extract_year("no year here") is None


class TestIdentifiers:

    @pytest.mark.parametrize("raw,expected", [
        ("9hA123", "9HA123"),
        ("9h-a 123", "9HA123"),
    ])
    def test_clean_call_sign(self, raw, expected):
        assert transforms.clean_call_sign(raw) == expected

    def test_clean_identifier_strips_number_label(self):
        assert transforms.clean_identifier("No. 12345") == "12345"
        assert transforms.clean_identifier("Number: AB-77") == "AB-77"

    def test_clean_identifier_keeps_words_starting_with_no(self):
        assert transforms.clean_identifier("NORTH123") == "NORTH123"

    def test_clean_imo_number(self):
        assert transforms.clean_imo_number("IMO No. 1234567") == "1234567"

    def test_clean_flag_state_drops_ship_suffix(self):
        assert transforms.clean_flag_state("Malta Ship") == "MALTA"


class TestDates:

    @pytest.mark.parametrize("raw,expected", [
        ("10 December 2020", "10-12-2020"),
        ("1st Jan 2021", "01-01-2021"),
        ("December 2020", "01-12-2020"),
        ("2020-12-10", "10-12-2020"),
        ("10/12/2020", "10-12-2020"),
    ])
    def test_format_date(self, raw, expected):
        assert transforms.format_date(raw) == expected

    def test_unrecognised_date_is_returned_unchanged(self):
        assert transforms.format_date("sometime soon") == "sometime soon"


class TestEnumerations:

    @pytest.mark.parametrize("raw,expected", [
        ("Motor Ship", "DIESEL"),
        ("Twin diesel", "DIESEL"),
        ("Petrol outboard", "GASOLINE"),
        ("Diesel-electric hybrid", "HYBRID"),
    ])
    def test_engine_type(self, raw, expected):
        assert transforms.engine_type_from_text(raw) == expected

    def test_yacht_type_and_category(self):
        assert transforms.yacht_type_from_description("Pleasure Yacht") == "MOTOR_YACHT"
        assert transforms.yacht_category_from_description("Pleasure Yacht") == "PRIVATE"
        assert transforms.yacht_category_from_description("Charter vessel") == "CHARTER"

    def test_owner_type(self):
        assert transforms.owner_type_from_description("Sole owner") == "INDIVIDUAL"
        assert transforms.owner_type_from_description("Body corporate") == "COMPANY"

    def test_hull_material(self):
        assert transforms.hull_material_from_text("Glass reinforced plastic") == "GRP"
        assert transforms.hull_material_from_text("Aluminium alloy") == "ALUMINIUM"


class TestTextHelpers:

    def test_owner_name_from_residence(self):
        assert transforms.owner_name_from_residence(
            "BLUE SEA LTD, 12 Harbour Street, Valletta"
        ) == "BLUE SEA LTD"

    def test_split_models_deduplicates_in_order(self):
        assert transforms.split_models("m1, m2; m1") == ["m1", "m2"]

    def test_clean_name_removes_quotes(self):
        assert transforms.clean_name('"STARK"  X') == "STARK X"

"""
Input coercion helpers and datetime normalization.
"""

from datetime import datetime

import pytest

from ghost_report.time_utils import parse_iso_datetime, serialize_db_datetime, to_db_datetime
from ghost_report.validation import (
    ValidationError,
    coerce_bool,
    coerce_int,
    id_list,
    json_object,
    require_fields,
    sighting_visibility,
    visibility_label,
)


class TestCoercion:

    @pytest.mark.parametrize("value, expected", [(3, 3), ("12", 12), (" 4 ", 4), (2.0, 2)])
    def test_coerce_int_accepts(self, value, expected):
        assert coerce_int(value, "id") == expected

    @pytest.mark.parametrize("value", [True, 1.5, "1.5", "1e3", "abc", None, [1], "\u00b2", "\u2460", "-\u00b2", "-", "\uff11"])
    def test_coerce_int_rejects(self, value):
        with pytest.raises(ValidationError) as exc:
            coerce_int(value, "id")
        assert exc.value.to_dict() == {"error": "invalid_field", "field": "id"}

    def test_require_fields_treats_blank_as_missing(self):
        with pytest.raises(ValidationError) as exc:
            require_fields({"a": " ", "b": 0, "c": None}, "a", "b", "c")
        assert exc.value.details["fields"] == ["a", "c"]

    def test_id_list_dedupes_in_order(self):
        assert id_list([3, "1", 3, 2], "ghostIDs") == [3, 1, 2]

    def test_id_list_requires_array(self):
        with pytest.raises(ValidationError):
            id_list("1,2", "ghostIDs")

    def test_json_object(self):
        assert json_object(None) == {}
        with pytest.raises(ValidationError):
            json_object([1, 2])

    def test_coerce_bool(self):
        assert coerce_bool("yes", "flag") is True
        assert coerce_bool(0, "flag") is False
        with pytest.raises(ValidationError):
            coerce_bool("maybe", "flag")


class TestVisibility:

    @pytest.mark.parametrize("value, label", [(None, "Faint"), (4, "Faint"), (5, "Clear"), (7, "Clear"), (8, "Very Clear"), (10, "Very Clear")])
    def test_labels(self, value, label):
        assert visibility_label(value) == label

    @pytest.mark.parametrize("value", [float("nan"), float("inf"), True, {}])
    def test_unusable_input_defaults(self, value):
        assert sighting_visibility(value) == 5

    @pytest.mark.parametrize("value", [-1, 11, 10.9, -0.5, "10.5"])
    def test_out_of_range(self, value):
        with pytest.raises(ValidationError) as exc:
            sighting_visibility(value)
        assert exc.value.to_dict() == {"error": "invalid_field", "field": "visibility"}

    @pytest.mark.parametrize("value, expected", [(9.7, 9), ("0.5", 0), (10.0, 10)])
    def test_fractions_inside_range_truncate(self, value, expected):
        assert sighting_visibility(value) == expected


class TestDatetimes:

    def test_parse_offset_to_utc(self):
        assert parse_iso_datetime("2024-11-15T20:00:00+01:00") == datetime(2024, 11, 15, 19, 0)

    def test_parse_blank(self):
        assert parse_iso_datetime("  ") is None

    def test_to_db_truncates(self):
        assert to_db_datetime(datetime(2024, 1, 2, 3, 4, 5, 999)) == "2024-01-02 03:04:05"

    def test_serialize_text_and_datetime(self):
        assert serialize_db_datetime("2024-01-02 03:04:05") == "2024-01-02T03:04:05"
        assert serialize_db_datetime(datetime(2024, 1, 2, 3, 4, 5)) == "2024-01-02T03:04:05"
        assert serialize_db_datetime("garbage") == "garbage"
        assert serialize_db_datetime(None) is None

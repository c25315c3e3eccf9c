"""Tests for option normalization helpers."""

import pytest

from optimizely_client.core.exceptions import ValidationError
from optimizely_client.core.models import DimensionFilter
from optimizely_client.utils.options import (
    as_options,
    dimension_filter,
    is_absent,
    pick,
    require,
    require_all,
    with_defaults,
    without,
)


def test_as_options_wraps_bare_identifiers():
    assert as_options("5") == {"id": "5"}
    assert as_options(5, "project_id") == {"project_id": 5}
    assert as_options(None) == {}


def test_as_options_copies_mappings():
    original = {"id": "5"}
    copied = as_options(original)
    copied["id"] = "6"
    assert original == {"id": "5"}


@pytest.mark.parametrize("value", [True, 3.5, ["5"]])
def test_as_options_rejects_other_types(value):
    with pytest.raises(ValidationError):
        as_options(value)


@pytest.mark.parametrize("value,absent", [(None, True), ("", True), (0, False), (False, False), ([], False)])
def test_is_absent(value, absent):
    assert is_absent(value) is absent


def test_require_coerces_to_string():
    assert require({"id": 42}, "id") == "42"
    assert require({"id": 0}, "id") == "0"


def test_require_raises_with_field_name():
    with pytest.raises(ValidationError, match="Required: id") as exc_info:
        require({}, "id")
    assert exc_info.value.fields == ("id",)


def test_require_all_reports_missing_in_order():
    with pytest.raises(ValidationError) as exc_info:
        require_all({"b": "x"}, ["a", "b", "c"])
    assert exc_info.value.fields == ("a", "c")


def test_with_defaults_keeps_explicit_falsy_values():
    merged = with_defaults(
        {"include_jquery": False, "weight": 0, "ip_filter": None},
        {"include_jquery": True, "weight": 5000, "ip_filter": "", "status": "Active"},
    )
    assert merged == {
        "include_jquery": False,
        "weight": 0,
        "ip_filter": "",
        "status": "Active",
    }


def test_with_defaults_does_not_share_list_defaults():
    defaults = {"conditions": []}
    first = with_defaults({}, defaults)
    first["conditions"].append("x")
    assert with_defaults({}, defaults)["conditions"] == []


def test_without_and_pick():
    options = {"id": 1, "name": "A", "description": None}
    assert without(options, "id") == {"name": "A", "description": None}
    assert pick(options, "name", "description", "missing") == {"name": "A"}


class TestDimensionFilter:
    """Test dimension filter validation."""

    def test_none_means_no_filter(self):
        assert dimension_filter(None) is None

    def test_valid_filter_coerces_numbers(self):
        parsed = dimension_filter({"id": 12, "value": "mobile"})
        assert parsed == DimensionFilter(id="12", value="mobile")

    def test_existing_filter_passes_through(self):
        existing = DimensionFilter(id="d1", value="v1")
        assert dimension_filter(existing) is existing

    @pytest.mark.parametrize(
        "value,missing",
        [
            ({"value": "v1"}, ("dimension.id",)),
            ({"id": "d1", "value": None}, ("dimension.value",)),
            ({"id": "", "value": ""}, ("dimension.id", "dimension.value")),
        ],
    )
    def test_missing_parts(self, value, missing):
        with pytest.raises(ValidationError) as exc_info:
            dimension_filter(value)
        assert exc_info.value.fields == missing

    def test_non_mapping_rejected(self):
        with pytest.raises(ValidationError):
            dimension_filter("d1:v1")

"""Unit tests for patchlang.schema.params: kinds and central coercion."""
from __future__ import annotations

import pytest

from patchlang.errors import ArgumentError
from patchlang.graph.models import ChannelKind
from patchlang.schema.params import (
    ParamKind,
    ParamSpec,
    check_arguments,
    coerce,
    coerce_arguments,
    is_identifier,
    parse_bool,
)

VALID_ID = "123456789012345678"


class TestParamKind:
    def test_from_name(self) -> None:
        assert ParamKind.from_name("id?") is ParamKind.OPTIONAL_ID
        assert ParamKind.from_name(" perms ") is ParamKind.PERMISSIONS

    def test_from_name_unknown(self) -> None:
        with pytest.raises(ValueError):
            ParamKind.from_name("float")

    def test_spec_str(self) -> None:
        assert str(ParamSpec("seconds", ParamKind.INT)) == "seconds@int"

    def test_spec_defaults_to_text(self) -> None:
        assert ParamSpec("topic").kind is ParamKind.TEXT


class TestIdentifiers:
    @pytest.mark.parametrize("value", ["12345678901234567", VALID_ID, "12345678901234567890"])
    def test_valid(self, value: str) -> None:
        assert is_identifier(value)

    @pytest.mark.parametrize("value", ["", "1234", "123456789012345678901", "12345678901234567a", " " + VALID_ID])
    def test_invalid(self, value: str) -> None:
        assert not is_identifier(value)

    def test_coerce_rejects_malformed(self) -> None:
        with pytest.raises(ArgumentError) as exc_info:
            coerce(ParamSpec("id", ParamKind.ID), "abc")
        assert exc_info.value.param == "id"
        assert str(exc_info.value).startswith("id: invalid identifier")

    @pytest.mark.parametrize("value", ["", "none", "NONE"])
    def test_optional_id_none_words(self, value: str) -> None:
        assert coerce(ParamSpec("parent", ParamKind.OPTIONAL_ID), value) is None

    def test_optional_id_value(self) -> None:
        assert coerce(ParamSpec("parent", ParamKind.OPTIONAL_ID), VALID_ID) == VALID_ID


class TestBooleans:
    @pytest.mark.parametrize("value", ["on", "TRUE", "1", "Yes"])
    def test_true(self, value: str) -> None:
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", ["off", "False", "0", "NO"])
    def test_false(self, value: str) -> None:
        assert parse_bool(value) is False

    def test_neither(self) -> None:
        assert parse_bool("maybe") is None

    def test_bool_rejects_empty(self) -> None:
        with pytest.raises(ArgumentError):
            coerce(ParamSpec("enabled", ParamKind.BOOL), "")

    def test_optional_bool_empty_is_false(self) -> None:
        assert coerce(ParamSpec("hoist", ParamKind.OPTIONAL_BOOL), "") is False


class TestOtherKinds:
    def test_int(self) -> None:
        assert coerce(ParamSpec("seconds", ParamKind.INT), "30") == 30

    @pytest.mark.parametrize("value", ["-1", "1.5", "", "ten"])
    def test_int_rejects(self, value: str) -> None:
        with pytest.raises(ArgumentError):
            coerce(ParamSpec("seconds", ParamKind.INT), value)

    def test_text_passes_anything(self) -> None:
        assert coerce(ParamSpec("topic"), "") == ""

    def test_name_rejects_empty(self) -> None:
        with pytest.raises(ArgumentError):
            coerce(ParamSpec("name", ParamKind.NAME), "")

    def test_channel_kind_alias(self) -> None:
        assert coerce(ParamSpec("ctype", ParamKind.CHANNEL_KIND), "news") is ChannelKind.ANNOUNCEMENT

    def test_channel_kind_rejects(self) -> None:
        with pytest.raises(ArgumentError):
            coerce(ParamSpec("ctype", ParamKind.CHANNEL_KIND), "thread")

    def test_permissions(self) -> None:
        value = coerce(ParamSpec("allow", ParamKind.PERMISSIONS), "ViewChannel, SendMessages")
        assert value == frozenset({"ViewChannel", "SendMessages"})

    def test_permissions_empty(self) -> None:
        assert coerce(ParamSpec("allow", ParamKind.PERMISSIONS), "") == frozenset()

    def test_permissions_unknown(self) -> None:
        with pytest.raises(ArgumentError) as exc_info:
            coerce(ParamSpec("allow", ParamKind.PERMISSIONS), "ViewChannel,FlyAway")
        assert "FlyAway" in str(exc_info.value)

    def test_color_normalized(self) -> None:
        assert coerce(ParamSpec("color", ParamKind.COLOR), "#FFAA00") == "#ffaa00"

    def test_color_empty(self) -> None:
        assert coerce(ParamSpec("color", ParamKind.COLOR), "") == ""

    def test_color_rejects(self) -> None:
        with pytest.raises(ArgumentError):
            coerce(ParamSpec("color", ParamKind.COLOR), "red")


class TestCoerceArguments:
    SPECS = (ParamSpec("id", ParamKind.ID), ParamSpec("seconds", ParamKind.INT))

    def test_converts_in_schema_order(self) -> None:
        args = coerce_arguments(self.SPECS, {"seconds": "5", "id": VALID_ID})
        assert list(args) == ["id", "seconds"]
        assert args == {"id": VALID_ID, "seconds": 5}

    def test_missing_value_treated_as_empty(self) -> None:
        with pytest.raises(ArgumentError) as exc_info:
            coerce_arguments(self.SPECS, {"id": VALID_ID})
        assert exc_info.value.param == "seconds"

    def test_check_arguments_collects_all(self) -> None:
        problems = check_arguments(self.SPECS, {"id": "x", "seconds": "y"})
        assert [p.param for p in problems] == ["id", "seconds"]

    def test_check_arguments_clean(self) -> None:
        assert check_arguments(self.SPECS, {"id": VALID_ID, "seconds": "0"}) == []

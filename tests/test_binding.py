"""Tests for wren.binding — typed binding from path, query and body."""

from dataclasses import dataclass

import pytest

from wren._internal.variables import Variables
from wren.binding import bind, bind_request, convert
from wren.errors import BindingError
from wren.shapes import FieldSpec, HandlerDescriptor, Shape


@dataclass
class Search:
    Topic: str = ""
    Page: int = 1
    Ratio: float = 0.5
    Exact: bool = False
    Limit: int | None = None


@dataclass
class Result:
    Success: bool


class UploadNews:
    @dataclass
    class Request:
        id: str = ""
        title: str = ""

    def handle(self, request: Request) -> None:
        return None


SEARCH = Shape.from_type(Search)
RESULT = Shape.from_type(Result)


class TestBind:
    def test_from_query(self) -> None:
        value = bind(SEARCH, {}, {"Topic": "sports", "Page": "3"}, {})
        assert value == Search(Topic="sports", Page=3)

    def test_absent_fields_keep_defaults(self) -> None:
        assert bind(SEARCH, {}, {}, {}) == Search()

    def test_absent_field_without_default_gets_zero(self) -> None:
        assert bind(RESULT, {}, {}, {}) == Result(Success=False)

    def test_path_beats_query_beats_body(self) -> None:
        value = bind(
            SEARCH,
            {"Topic": "path"},
            {"Topic": "query", "Page": "2"},
            {"Topic": "body", "Page": 7, "Exact": True},
        )
        assert value.Topic == "path"
        assert value.Page == 2
        assert value.Exact is True

    def test_query_beats_body(self) -> None:
        value = bind(SEARCH, {}, {"Page": "2"}, {"Page": 5})
        assert value.Page == 2

    def test_case_insensitive_names(self) -> None:
        value = bind(SEARCH, {}, {"topic": "a", "PAGE": "4"}, {"exact": "yes"})
        assert value.Topic == "a"
        assert value.Page == 4
        assert value.Exact is True

    def test_variables_source(self) -> None:
        value = bind(SEARCH, Variables({"TOPIC": "x"}), {}, {})
        assert value.Topic == "x"

    def test_bool_from_string(self) -> None:
        assert bind(RESULT, {}, {"Success": "true"}, {}) == Result(Success=True)

    def test_bad_bool_raises(self) -> None:
        with pytest.raises(BindingError) as exc_info:
            bind(RESULT, {}, {"Success": "notabool"}, {})
        assert exc_info.value.field == "Success"
        assert exc_info.value.raw_value == "notabool"

    def test_bad_value_is_not_defaulted(self) -> None:
        with pytest.raises(BindingError):
            bind(SEARCH, {}, {"Page": "two"}, {})

    def test_optional_int(self) -> None:
        assert bind(SEARCH, {}, {"Limit": "10"}, {}).Limit == 10
        assert bind(SEARCH, {}, {}, {"Limit": None}).Limit is None

    def test_body_types_pass_through(self) -> None:
        value = bind(SEARCH, {}, {}, {"Page": 9, "Ratio": 2, "Exact": False})
        assert value.Page == 9
        assert value.Ratio == 2.0
        assert value.Exact is False


class TestBindRequest:
    def test_no_request_type(self) -> None:
        class NoRequest:
            def handle(self, request: None) -> None:
                return None

        descriptor = HandlerDescriptor.for_handler(NoRequest)
        assert bind_request(descriptor, "GET", {}, {}) is None

    def test_body_ignored_for_get(self) -> None:
        descriptor = HandlerDescriptor.for_handler(UploadNews)
        value = bind_request(descriptor, "GET", {}, {}, {"title": "ignored"})
        assert value.title == ""

    @pytest.mark.parametrize("method", ["POST", "PUT", "PATCH"])
    def test_body_used_for_body_methods(self, method: str) -> None:
        descriptor = HandlerDescriptor.for_handler(UploadNews)
        value = bind_request(descriptor, method, {"id": "7"}, {}, {"title": "Hi"})
        assert value.id == "7"
        assert value.title == "Hi"


class TestConvert:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("true", True),
            ("TRUE", True),
            ("1", True),
            ("yes", True),
            ("on", True),
            ("false", False),
            ("0", False),
            ("No", False),
            ("off", False),
        ],
    )
    def test_bool_tokens(self, raw: str, expected: bool) -> None:
        assert convert(FieldSpec("flag", bool), raw) is expected

    def test_int_rejects_float_string(self) -> None:
        with pytest.raises(BindingError):
            convert(FieldSpec("n", int), "1.5")

    def test_int_rejects_bool(self) -> None:
        with pytest.raises(BindingError):
            convert(FieldSpec("n", int), True)

    def test_int_from_whole_float(self) -> None:
        assert convert(FieldSpec("n", int), 3.0) == 3

    def test_float(self) -> None:
        assert convert(FieldSpec("x", float), " 2.5 ") == 2.5

    @pytest.mark.parametrize("raw", ["nan", "inf", "-inf"])
    def test_float_rejects_non_finite(self, raw: str) -> None:
        with pytest.raises(BindingError):
            convert(FieldSpec("x", float), raw)

    def test_str_from_number(self) -> None:
        assert convert(FieldSpec("s", str), 42) == "42"

    def test_none_for_required_scalar(self) -> None:
        with pytest.raises(BindingError):
            convert(FieldSpec("n", int), None)

    def test_unknown_type_passes_through(self) -> None:
        payload = {"a": [1, 2]}
        assert convert(FieldSpec("data", dict), payload) is payload

    @pytest.mark.parametrize(("raw", "expected"), [(1, True), (0, False)])
    def test_bool_from_json_number(self, raw: int, expected: bool) -> None:
        assert convert(FieldSpec("flag", bool), raw) is expected

    def test_bool_rejects_other_numbers(self) -> None:
        with pytest.raises(BindingError):
            convert(FieldSpec("flag", bool), 2)

    @pytest.mark.parametrize("raw", [{"a": 1}, [1, 2]])
    def test_str_rejects_containers(self, raw: object) -> None:
        with pytest.raises(BindingError) as exc_info:
            convert(FieldSpec("title", str), raw)
        assert exc_info.value.field == "title"

    def test_str_from_json_bool(self) -> None:
        assert convert(FieldSpec("s", str), True) == "true"


class TestBindBodyScalars:
    def test_numeric_flag_in_body(self) -> None:
        assert bind(RESULT, {}, {}, {"Success": 1}) == Result(Success=True)

    def test_object_for_string_field(self) -> None:
        with pytest.raises(BindingError):
            bind(SEARCH, {}, {}, {"Topic": {"nested": "value"}})

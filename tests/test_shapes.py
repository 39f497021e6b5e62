"""Tests for wren.shapes — field lists and handler descriptors."""

from dataclasses import dataclass, field

import pytest

from wren.errors import ConfigurationError
from wren.shapes import HandlerDescriptor, Shape, unwrap_optional


@dataclass
class Article:
    title: str = field(default="", metadata={"description": "Headline"})
    views: int = 0
    score: float | None = None
    draft: bool = field(default=False, metadata={"source": "query"})
    tags: list[str] = field(default_factory=list)


class GetNews:
    """Latest headlines.

    Longer description.
    """

    @dataclass
    class Request:
        topic: str = ""

    @dataclass
    class Response:
        news: list[str] = field(default_factory=list)

    def handle(self, request: Request) -> Response:
        return self.Response(news=[request.topic])


class Ping:
    def handle(self, request: None) -> dict[str, bool]:
        return {"ok": True}


class TestUnwrapOptional:
    def test_optional(self) -> None:
        assert unwrap_optional(int | None) == (int, True)

    def test_plain(self) -> None:
        assert unwrap_optional(str) == (str, False)


class TestShape:
    def test_fields_in_order(self) -> None:
        shape = Shape.from_type(Article)
        assert shape.field_names() == ("title", "views", "score", "draft", "tags")
        assert len(shape) == 5

    def test_metadata(self) -> None:
        by_name = {f.name: f for f in Shape.from_type(Article).fields}
        assert by_name["title"].description == "Headline"
        assert by_name["draft"].source == "query"
        assert by_name["views"].source is None

    def test_optional_field(self) -> None:
        score = Shape.from_type(Article).fields[2]
        assert score.optional is True
        assert score.base_type is float

    def test_zero_values(self) -> None:
        @dataclass
        class NoDefaults:
            name: str
            count: int
            ratio: float
            flag: bool
            maybe: int | None
            other: list[int]

        zeros = [f.zero() for f in Shape.from_type(NoDefaults).fields]
        assert zeros == ["", 0, 0.0, False, None, None]

    def test_default_factory(self) -> None:
        tags = Shape.from_type(Article).fields[4]
        assert tags.has_default
        first, second = tags.zero(), tags.zero()
        assert first == [] and first is not second

    def test_build(self) -> None:
        shape = Shape.from_type(Article)
        article = shape.build({"title": "t", "views": 1, "score": None, "draft": True, "tags": []})
        assert article == Article(title="t", views=1, draft=True)

    def test_qualname(self) -> None:
        assert Shape.from_type(GetNews.Request).qualname == f"{__name__}.GetNews.Request"

    def test_rejects_non_dataclass(self) -> None:
        class Plain:
            x: int = 0

        with pytest.raises(ConfigurationError, match="not a dataclass"):
            Shape.from_type(Plain)


class TestHandlerDescriptor:
    def test_nested_shapes(self) -> None:
        descriptor = HandlerDescriptor.for_handler(GetNews)
        assert descriptor.identity is GetNews
        assert descriptor.request is not None
        assert descriptor.request.type is GetNews.Request
        assert descriptor.response is not None
        assert descriptor.response.type is GetNews.Response

    def test_group_from_module(self) -> None:
        descriptor = HandlerDescriptor.for_handler(GetNews)
        assert descriptor.group == __name__.rsplit(".", 1)[-1]

    def test_explicit_group(self) -> None:
        assert HandlerDescriptor.for_handler(GetNews, group="news").group == "news"

    def test_summary_is_first_docstring_line(self) -> None:
        assert HandlerDescriptor.for_handler(GetNews).summary == "Latest headlines."

    def test_no_request_or_response(self) -> None:
        descriptor = HandlerDescriptor.for_handler(Ping)
        assert descriptor.request is None
        assert descriptor.response is None
        assert descriptor.summary is None

    def test_requires_handle(self) -> None:
        class NoHandle:
            pass

        with pytest.raises(ConfigurationError, match="handle"):
            HandlerDescriptor.for_handler(NoHandle)

    def test_names(self) -> None:
        descriptor = HandlerDescriptor.for_handler(GetNews)
        assert descriptor.name == "GetNews"
        assert descriptor.qualname == f"{__name__}.GetNews"

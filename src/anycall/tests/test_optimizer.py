"""Tests for the response optimizer."""

from __future__ import annotations

import json

import pytest
from pydantic import TypeAdapter, ValidationError

from anycall.foundation.errors import ConfigurationError, ResponseParseError, ResponseTypeError
from anycall.optimize import (
    HtmlOptimizerConfig,
    JsonOptimizerConfig,
    OptimizerConfig,
    OptimizerParameters,
    TextOptimizerConfig,
    configure_response_optimizer,
    serialize_response,
)


# ═════════════════════════════════════════════════════════════════════════════
# Fallback serializer
# ═════════════════════════════════════════════════════════════════════════════


def test_fallback_returns_strings_unchanged() -> None:
    optimize = configure_response_optimizer(None)
    once = optimize("plain body")
    assert once == "plain body"
    assert optimize(once) == once


def test_fallback_pretty_prints_structures() -> None:
    optimize = configure_response_optimizer(None)
    assert optimize({"a": 1}) == '{\n  "a": 1\n}'
    assert optimize([1, 2]) == "[\n  1,\n  2\n]"
    assert optimize(None) == "null"
    assert optimize(True) == "true"
    assert optimize(42) == "42"


def test_fallback_coerces_other_values() -> None:
    class Thing:
        def __str__(self) -> str:
            return "thing"

    assert serialize_response(Thing()) == "thing"
    assert serialize_response(b"bytes") == "bytes"


def test_fallback_handles_integers_beyond_64_bits() -> None:
    optimize = configure_response_optimizer(None)
    assert json.loads(optimize({"id": 2**70, "small": 7})) == {"id": float(2**70), "small": 7}
    assert json.loads(optimize([10**400])) == [str(10**400)]


# ═════════════════════════════════════════════════════════════════════════════
# html
# ═════════════════════════════════════════════════════════════════════════════


def test_html_extracts_inner_html() -> None:
    optimize = configure_response_optimizer(HtmlOptimizerConfig(css_selector="li"))
    output = optimize("<ul><li>One</li><li>Two</li></ul>")
    assert json.loads(output) == ["One", "Two"]
    assert output == '[\n  "One",\n  "Two"\n]'


def test_html_keeps_markup_without_only_content() -> None:
    optimize = configure_response_optimizer(HtmlOptimizerConfig(css_selector="div.card"))
    output = optimize('<div class="card">\n  <b>Bold</b>   text\n</div><div>skip</div>')
    assert json.loads(output) == ["<b>Bold</b> text"]


def test_html_only_content_flattens_and_omits() -> None:
    config = HtmlOptimizerConfig(
        css_selector="article",
        only_content=True,
        elements_to_omit=".ad, nav",
    )
    assert config.elements_to_omit == (".ad", "nav")
    optimize = configure_response_optimizer(config)

    html = (
        "<article><nav>Menu</nav><p>Hello <em>world</em></p>"
        '<div class="ad">Buy now</div><script>var x = 1;</script></article>'
    )
    assert json.loads(optimize(html)) == ["Hello world"]


def test_html_only_content_keeps_word_breaks() -> None:
    optimize = configure_response_optimizer(HtmlOptimizerConfig(css_selector="p", only_content=True))
    output = optimize("<p>Hello\nworld, this is\n  a sentence</p>")
    assert json.loads(output) == ["Hello world, this is a sentence"]


def test_html_invalid_omit_selector_carries_item_index() -> None:
    config = HtmlOptimizerConfig(css_selector="div", only_content=True, elements_to_omit="a[[")
    optimize = configure_response_optimizer(config, item_index=9)
    with pytest.raises(ConfigurationError, match="elements to omit") as excinfo:
        optimize("<div><a>x</a></div>")
    assert excinfo.value.item_index == 9


def test_html_no_match_is_empty_array() -> None:
    optimize = configure_response_optimizer(HtmlOptimizerConfig(css_selector="table"))
    assert optimize("<p>nothing here</p>") == "[]"


def test_html_element_without_children_is_empty_string() -> None:
    optimize = configure_response_optimizer(HtmlOptimizerConfig(css_selector="span"))
    assert json.loads(optimize("<span></span><span> x </span>")) == ["", "x"]


@pytest.mark.parametrize("response", [{"html": "<p>x</p>"}, ["<p>"], 7, None])
def test_html_requires_string(response: object) -> None:
    optimize = configure_response_optimizer(HtmlOptimizerConfig(css_selector="p"), item_index=5)
    with pytest.raises(ResponseTypeError) as excinfo:
        optimize(response)
    assert excinfo.value.item_index == 5
    assert "must be a string" in str(excinfo.value)
    assert isinstance(excinfo.value, TypeError)


def test_html_invalid_selector() -> None:
    optimize = configure_response_optimizer(HtmlOptimizerConfig(css_selector="li[["))
    with pytest.raises(ConfigurationError, match="Invalid CSS selector"):
        optimize("<li>x</li>")


def test_html_config_validation() -> None:
    with pytest.raises(ValidationError):
        HtmlOptimizerConfig(css_selector="")
    # Omission only applies when flattening to text
    assert HtmlOptimizerConfig(css_selector="p", elements_to_omit="a,b").elements_to_omit == ()


# ═════════════════════════════════════════════════════════════════════════════
# text
# ═════════════════════════════════════════════════════════════════════════════


def test_text_truncates() -> None:
    assert configure_response_optimizer(TextOptimizerConfig(max_length=5))("abcdefgh") == "abcde"
    assert configure_response_optimizer(TextOptimizerConfig(max_length=8))("abcdefgh") == "abcdefgh"


def test_text_zero_is_unbounded() -> None:
    text = "x" * 10_000
    assert configure_response_optimizer(TextOptimizerConfig(max_length=0))(text) == text


def test_text_requires_string() -> None:
    optimize = configure_response_optimizer(TextOptimizerConfig(max_length=5))
    with pytest.raises(ResponseTypeError):
        optimize({"a": "b"})


def test_text_rejects_negative_length() -> None:
    with pytest.raises(ValidationError):
        TextOptimizerConfig(max_length=-1)


# ═════════════════════════════════════════════════════════════════════════════
# json
# ═════════════════════════════════════════════════════════════════════════════


def test_json_all_round_trips() -> None:
    optimize = configure_response_optimizer(JsonOptimizerConfig())
    data = [{"a": 1}, {"a": 2}]
    assert json.loads(optimize(json.dumps(data))) == data
    assert json.loads(optimize(data)) == data


def test_json_object_is_wrapped() -> None:
    optimize = configure_response_optimizer(JsonOptimizerConfig())
    assert json.loads(optimize('{"a": 1}')) == [{"a": 1}]


def test_json_data_field_unwraps_array() -> None:
    optimize = configure_response_optimizer(
        JsonOptimizerConfig(data_field="result", fields_to_include="selected", fields=["a"])
    )
    output = optimize({"result": [{"a": 1, "b": 9}, {"a": 2}]})
    assert json.loads(output) == [{"a": 1}, {"a": 2}]


def test_json_data_field_dotted_object_is_wrapped() -> None:
    optimize = configure_response_optimizer(JsonOptimizerConfig(data_field="data.user"))
    assert json.loads(optimize({"data": {"user": {"id": 7}}})) == [{"id": 7}]


def test_json_data_field_on_array_maps_each_item() -> None:
    optimize = configure_response_optimizer(JsonOptimizerConfig(data_field="node"))
    output = optimize([{"node": {"id": 1}}, {"other": True}, {"node": {"id": 3}}])
    assert json.loads(output) == [{"id": 1}, None, {"id": 3}]


def test_json_selected_dotted_paths() -> None:
    optimize = configure_response_optimizer(
        JsonOptimizerConfig(fields_to_include="selected", fields="id, owner.login, tags[0], missing.deep")
    )
    item = {"id": 1, "owner": {"login": "octo", "site_admin": False}, "tags": ["x", "y"], "size": 10}
    assert json.loads(optimize([item])) == [
        {"id": 1, "owner": {"login": "octo"}, "tags": ["x"], "missing": {}},
    ]


def test_json_except_removes_fields() -> None:
    optimize = configure_response_optimizer(JsonOptimizerConfig(fields_to_include="except", fields=["a"]))
    assert json.loads(optimize('[{"a": 1, "b": 2}]')) == [{"b": 2}]


def test_json_except_nested_and_missing_paths() -> None:
    optimize = configure_response_optimizer(
        JsonOptimizerConfig(fields_to_include="except", fields="meta.etag,nothing.here")
    )
    output = optimize({"meta": {"etag": "abc", "page": 1}, "id": 5})
    assert json.loads(output) == [{"meta": {"page": 1}, "id": 5}]


def test_json_except_does_not_touch_caller_data() -> None:
    optimize = configure_response_optimizer(JsonOptimizerConfig(fields_to_include="except", fields=["secret"]))
    data = [{"secret": "s", "id": 1}]
    optimize(data)
    assert data == [{"secret": "s", "id": 1}]


@pytest.mark.parametrize("response", ["42", '"text"', "null", 3.5, True])
def test_json_rejects_scalars(response: object) -> None:
    optimize = configure_response_optimizer(JsonOptimizerConfig(), item_index=2)
    with pytest.raises(ConfigurationError, match="object or an array") as excinfo:
        optimize(response)
    assert excinfo.value.item_index == 2


def test_json_malformed_text() -> None:
    optimize = configure_response_optimizer(JsonOptimizerConfig())
    with pytest.raises(ResponseParseError):
        optimize("{not json")


def test_json_projection_handles_integers_beyond_64_bits() -> None:
    optimize = configure_response_optimizer(JsonOptimizerConfig(fields_to_include="selected", fields="id"))
    assert json.loads(optimize([{"id": -(2**64), "name": "big"}])) == [{"id": float(-(2**64))}]


def test_json_output_indentation() -> None:
    optimize = configure_response_optimizer(JsonOptimizerConfig())
    assert optimize([{"a": 1}]) == '[\n  {\n    "a": 1\n  }\n]'


# ═════════════════════════════════════════════════════════════════════════════
# Configuration
# ═════════════════════════════════════════════════════════════════════════════


def test_optimizer_config_is_discriminated() -> None:
    adapter: TypeAdapter[OptimizerConfig] = TypeAdapter(OptimizerConfig)
    assert isinstance(adapter.validate_python({"kind": "text", "max_length": 3}), TextOptimizerConfig)
    assert isinstance(adapter.validate_python({"kind": "html", "css_selector": "p"}), HtmlOptimizerConfig)
    assert isinstance(adapter.validate_python({"kind": "json"}), JsonOptimizerConfig)
    with pytest.raises(ValidationError):
        adapter.validate_python({"kind": "xml"})


def test_parameters_disabled_gives_fallback() -> None:
    params = OptimizerParameters(optimizeResponse=False, responseType="text", maxLength=3)
    assert params.to_config() is None
    assert configure_response_optimizer(params.to_config())("abcdef") == "abcdef"


def test_parameters_to_config() -> None:
    html = OptimizerParameters(
        optimize_response=True, response_type="html", css_selector="p", only_content=True, elements_to_omit="a, img"
    ).to_config()
    assert html == HtmlOptimizerConfig(css_selector="p", only_content=True, elements_to_omit=("a", "img"))

    data = OptimizerParameters(
        optimizeResponse=True, responseType="json", dataField="items", fieldsToInclude="selected", fields="id,name"
    ).to_config()
    assert data == JsonOptimizerConfig(data_field="items", fields_to_include="selected", fields=("id", "name"))

    everything = OptimizerParameters(optimize_response=True, fields="ignored").to_config()
    assert everything == JsonOptimizerConfig()


def test_config_is_not_mutated_by_building() -> None:
    config = JsonOptimizerConfig(fields_to_include="except", fields=("a",))
    before = config.model_dump()
    configure_response_optimizer(config)([{"a": 1}])
    assert config.model_dump() == before

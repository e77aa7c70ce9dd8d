"""Tests for raw result handling and Nova result conversion."""

import pytest

from conftest import nova_response, streaming_body
from shared.bedrock_result import RawBedrockResult
from shared.nova import get_model
from shared.nova_result import NovaResultConverter, NovaResultError, TextResult, ToolCallResult


def test_raw_result_decodes_body_once():
    raw = RawBedrockResult(nova_response([{"text": "Hello"}]))

    first = raw.get_data()
    second = raw.get_data()

    assert first is second
    assert first["output"]["message"]["content"] == [{"text": "Hello"}]


def test_raw_result_accepts_bytes_body():
    raw = RawBedrockResult({"body": b'{"output": {}}'})

    assert raw.get_data() == {"output": {}}


def test_converts_text():
    result = NovaResultConverter().convert(RawBedrockResult(nova_response([{"text": "Hello"}])))

    assert isinstance(result, TextResult)
    assert result.content == "Hello"
    assert result.metadata == {"stop_reason": "end_turn", "input_tokens": 12, "output_tokens": 7}


def test_converts_tool_calls():
    content = [
        {"text": "Checking the weather."},
        {"toolUse": {"toolUseId": "call-1", "name": "weather", "input": {"city": "Paris"}}},
        {"toolUse": {"toolUseId": "call-2", "name": "clock", "input": {}}},
    ]
    raw = RawBedrockResult(nova_response(content, stop_reason="tool_use"))

    result = NovaResultConverter().convert(raw)

    assert isinstance(result, ToolCallResult)
    assert [(c.id, c.name, c.arguments) for c in result.tool_calls] == [
        ("call-1", "weather", {"city": "Paris"}),
        ("call-2", "clock", {}),
    ]
    assert result.metadata["stop_reason"] == "tool_use"
    assert result.raw is raw


@pytest.mark.parametrize("data", [{}, {"output": {}}, {"output": None}])
def test_missing_output_is_an_error(data):
    raw = RawBedrockResult({"body": streaming_body(data)})

    with pytest.raises(NovaResultError, match="any content"):
        NovaResultConverter().convert(raw)


def test_content_without_text_is_an_error():
    content = [{"toolUse": {"toolUseId": "call-1", "name": "weather", "input": {}}}]

    with pytest.raises(NovaResultError, match="any text"):
        NovaResultConverter().convert(RawBedrockResult(nova_response(content)))


def test_converter_supports_nova_only():
    converter = NovaResultConverter()

    assert converter.supports(get_model("nova-micro"))
    assert not converter.supports("nova-micro")

"""Conversion of raw Nova responses into text or tool-call results."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from shared.bedrock_result import RawBedrockResult
from shared.nova import Nova


class NovaResultError(RuntimeError):
    """Model output could not be interpreted."""
    pass


@dataclass
class ToolCall:
    id: str
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)


@dataclass
class TextResult:
    content: str
    metadata: Dict[str, Any] = field(default_factory=dict)
    raw: Optional[RawBedrockResult] = None


@dataclass
class ToolCallResult:
    tool_calls: List[ToolCall]
    metadata: Dict[str, Any] = field(default_factory=dict)
    raw: Optional[RawBedrockResult] = None


class NovaResultConverter:
    """Reads the ``output.message.content`` blocks of a Nova response."""

    def supports(self, model) -> bool:
        return isinstance(model, Nova)

    def convert(self, result: RawBedrockResult):
        data = result.get_data()

        output = data.get("output")
        if not output:
            raise NovaResultError("Response does not contain any content.")

        content = (output.get("message") or {}).get("content") or []
        if not content or "text" not in content[0]:
            raise NovaResultError("Response content does not contain any text.")

        metadata = _metadata(data)

        tool_calls = [
            ToolCall(
                id=block["toolUse"]["toolUseId"],
                name=block["toolUse"]["name"],
                arguments=block["toolUse"].get("input") or {},
            )
            for block in content
            if "toolUse" in block
        ]
        if tool_calls:
            return ToolCallResult(tool_calls=tool_calls, metadata=metadata, raw=result)

        return TextResult(content=content[0]["text"], metadata=metadata, raw=result)


def _metadata(data: Dict[str, Any]) -> Dict[str, Any]:
    usage = data.get("usage") or {}
    return {
        "stop_reason": data.get("stopReason"),
        "input_tokens": usage.get("inputTokens", 0),
        "output_tokens": usage.get("outputTokens", 0),
    }

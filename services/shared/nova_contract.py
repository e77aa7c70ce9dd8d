"""Chat message and tool normalization into the Nova wire format.

Nova takes the system prompt as a separate ``system`` array, conversation
turns as ``messages`` with typed content blocks, and tool results as
``toolResult`` blocks inside a user turn. Turns must alternate between
``user`` and ``assistant``.
"""

from typing import Any, Dict, Iterable, List

from shared.models import ChatMessage, ToolDefinition


def normalize_messages(messages: Iterable[ChatMessage]) -> Dict[str, Any]:
    """Build the ``system``/``messages`` part of a Nova payload."""
    system: List[Dict[str, str]] = []
    turns: List[Dict[str, Any]] = []

    for message in messages:
        if message.role == "system":
            system.append({"text": message.content or ""})
        elif message.role == "tool":
            _append_turn(turns, "user", [{
                "toolResult": {
                    "toolUseId": message.tool_call_id,
                    "content": [{"json": {"text": message.content or ""}}],
                }
            }])
        elif message.role == "assistant" and message.tool_calls:
            blocks: List[Dict[str, Any]] = []
            if message.content:
                blocks.append({"text": message.content})
            for call in message.tool_calls:
                blocks.append({
                    "toolUse": {
                        "toolUseId": call.id,
                        "name": call.name,
                        "input": call.arguments,
                    }
                })
            _append_turn(turns, "assistant", blocks)
        else:
            _append_turn(turns, message.role, [{"text": message.content or ""}])

    payload: Dict[str, Any] = {"messages": turns}
    if system:
        payload["system"] = system
    return payload


def _append_turn(turns: List[Dict[str, Any]], role: str, blocks: List[Dict[str, Any]]):
    # consecutive messages of one role (e.g. parallel tool results) merge into one turn
    if turns and turns[-1]["role"] == role:
        turns[-1]["content"].extend(blocks)
    else:
        turns.append({"role": role, "content": blocks})


def normalize_tool(tool: ToolDefinition) -> Dict[str, Any]:
    """Describe a tool as a Nova ``toolSpec``."""
    schema = tool.parameters or {"type": "object", "properties": {}}
    return {
        "toolSpec": {
            "name": tool.name,
            "description": tool.description,
            "inputSchema": {"json": schema},
        }
    }

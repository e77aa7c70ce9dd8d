"""Pydantic models for the Nova inference service."""

from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional


class ToolCallModel(BaseModel):
    """A tool invocation requested by the model."""
    id: str
    name: str
    arguments: Dict[str, Any] = Field(default_factory=dict)


class ChatMessage(BaseModel):
    """One conversation turn."""
    role: Literal["system", "user", "assistant", "tool"]
    content: Optional[str] = None
    tool_calls: Optional[List[ToolCallModel]] = None
    tool_call_id: Optional[str] = None


class ToolDefinition(BaseModel):
    """A tool the model may call."""
    name: str
    description: str = ""
    parameters: Optional[Dict[str, Any]] = None


class ChatRequest(BaseModel):
    """Chat completion request payload."""
    messages: List[ChatMessage]
    model: Optional[str] = None
    max_tokens: Optional[int] = None
    temperature: Optional[float] = None
    tools: Optional[List[ToolDefinition]] = None


class ChatResponse(BaseModel):
    """Chat completion response."""
    output: str
    tool_calls: List[ToolCallModel] = Field(default_factory=list)
    model_id: str
    stop_reason: Optional[str] = None
    latency_ms: float
    correlation_id: str

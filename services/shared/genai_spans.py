"""GenAI span helpers for Bedrock inference.

Context manager for OpenTelemetry spans following the GenAI semantic
conventions, plus the lab.* attributes used on platform dashboards.
"""

from opentelemetry import trace
from typing import Optional
import time


class GenAISpanContext:
    """Context manager for GenAI inference spans with timing."""

    def __init__(
        self,
        tracer=None,
        operation_name: str = "genai.chat",
        model_name: str = "",
        model_id: str = "",
        correlation_id: Optional[str] = None,
    ):
        self.span_name = operation_name
        self.model_name = model_name
        self.model_id = model_id
        self.correlation_id = correlation_id
        self._tracer = tracer or trace.get_tracer("genai")
        self.span = None
        self.start_time = None

    def __enter__(self):
        self.span = self._tracer.start_span(self.span_name)
        self.start_time = time.perf_counter()

        self.span.set_attribute("genai.system", "aws.bedrock")
        self.span.set_attribute("genai.operation.name", "chat")
        self.span.set_attribute("genai.request.model", self.model_id)
        self.span.set_attribute("lab.model.name", self.model_name)
        if self.correlation_id:
            self.span.set_attribute("correlation_id", self.correlation_id)

        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.span.set_attribute("error.type", exc_type.__name__)
            self.span.set_attribute("error.message", str(exc_val)[:200])
        self.span.end()

    def set_request_options(self, temperature: Optional[float], max_tokens: Optional[int]):
        if temperature is not None:
            self.span.set_attribute("genai.request.temperature", temperature)
        if max_tokens is not None:
            self.span.set_attribute("genai.request.max_tokens", max_tokens)

    def record_completion(
        self,
        input_tokens: int,
        output_tokens: int,
        stop_reason: Optional[str] = None
    ):
        """Record token usage and throughput."""
        duration_ms = (time.perf_counter() - self.start_time) * 1000

        self.span.set_attribute("genai.usage.input_tokens", input_tokens)
        self.span.set_attribute("genai.usage.output_tokens", output_tokens)
        self.span.set_attribute("genai.usage.total_tokens", input_tokens + output_tokens)

        if stop_reason:
            self.span.set_attribute("genai.response.finish_reasons", [stop_reason])

        if output_tokens > 0 and duration_ms > 0:
            tokens_per_sec = (output_tokens / duration_ms) * 1000
            self.span.set_attribute("lab.llm.tpot.ms", int(duration_ms / output_tokens))
            self.span.set_attribute("lab.llm.tokens_per_sec", round(tokens_per_sec, 1))

"""Bedrock Nova model client with OTEL tracing."""

import os
import json
import copy
import logging
from typing import Optional, Dict, Any

import boto3
from botocore.config import Config
from opentelemetry import trace

from shared.bedrock_result import RawBedrockResult
from shared.nova import Nova

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/json"


def create_bedrock_runtime_client(
    region_name: Optional[str] = None,
    timeout_ms: int = 30000,
    max_attempts: int = 1,
):
    """Build a ``bedrock-runtime`` client with read timeout and retry limits."""
    config = Config(
        read_timeout=timeout_ms / 1000,
        connect_timeout=5,
        retries={'max_attempts': max_attempts}
    )
    return boto3.client(
        'bedrock-runtime',
        region_name=region_name or os.getenv('AWS_REGION', 'us-east-1'),
        config=config
    )


def build_request_body(
    payload: Dict[str, Any],
    options: Optional[Dict[str, Any]] = None
) -> Dict[str, Any]:
    """
    Shape a Nova ``invoke_model`` body from a message payload and options.

    ``temperature`` and ``max_tokens`` move into ``inferenceConfig`` (the
    latter renamed to ``maxTokens``) and ``tools`` into ``toolConfig``.
    Other option keys are dropped. The payload's own ``model`` key is
    removed, everything else in it is sent as is. Option-derived blocks
    replace same-named keys of the payload.
    """
    options = options or {}
    body: Dict[str, Any] = copy.deepcopy(
        {k: v for k, v in payload.items() if k != "model"}
    )

    inference_config = {}
    if options.get("temperature") is not None:
        inference_config["temperature"] = options["temperature"]
    if options.get("max_tokens") is not None:
        inference_config["maxTokens"] = options["max_tokens"]
    if inference_config:
        body["inferenceConfig"] = inference_config

    tools = options.get("tools")
    if tools:
        body["toolConfig"] = {"tools": list(tools)}

    return body


class NovaModelClient:
    """Sends Nova requests through a ``bedrock-runtime`` client."""

    def __init__(self, bedrock_runtime, bedrock=None):
        self.bedrock_runtime = bedrock_runtime
        self._bedrock = bedrock
        self.tracer = trace.get_tracer(__name__)

    def supports(self, model) -> bool:
        return isinstance(model, Nova)

    def get_model_id(self, model: Nova) -> str:
        """Map a short model name to the cross-region inference profile id."""
        region = self.bedrock_runtime.meta.region_name or ""
        return f"{region[:2]}.amazon.{model.name}-v1:0"

    def request(
        self,
        model: Nova,
        payload: Dict[str, Any],
        options: Optional[Dict[str, Any]] = None
    ) -> RawBedrockResult:
        """
        Invoke the model once and wrap the SDK response.

        Args:
            model: Nova descriptor selecting the model id
            payload: Message fields (``messages``, ``system``, ...)
            options: ``temperature``, ``max_tokens`` and ``tools``

        Returns:
            RawBedrockResult around the ``invoke_model`` response

        Raises:
            ValueError: If the model is not a Nova model
            botocore.exceptions.ClientError: If Bedrock rejects the call
        """
        if not self.supports(model):
            raise ValueError(f"Unsupported model: {model!r}")

        model_id = self.get_model_id(model)
        body = build_request_body(payload, options)

        with self.tracer.start_as_current_span("bedrock.invoke_model") as span:
            span.set_attribute("bedrock.model_id", model_id)

            try:
                logger.debug("Invoking %s", model_id)
                response = self.bedrock_runtime.invoke_model(
                    modelId=model_id,
                    contentType=CONTENT_TYPE,
                    accept=CONTENT_TYPE,
                    body=json.dumps(body),
                )
                span.set_attribute("bedrock.success", True)
                return RawBedrockResult(response)

            except Exception as e:
                span.set_attribute("bedrock.error", str(e))
                span.set_attribute("bedrock.error_type", type(e).__name__)
                raise

    def check_model_access(self, model: Nova) -> bool:
        """Check that the model's inference profile is active in this region."""
        if self._bedrock is None:
            self._bedrock = boto3.client(
                'bedrock',
                region_name=self.bedrock_runtime.meta.region_name
            )
        try:
            response = self._bedrock.get_inference_profile(
                inferenceProfileIdentifier=self.get_model_id(model)
            )
            return response.get('status') == 'ACTIVE'
        except Exception:
            logger.warning("Inference profile lookup failed for %s", model.name, exc_info=True)
            return False

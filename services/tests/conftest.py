"""Shared fixtures for the services test suite."""

import io
import json
import os
import sys
import importlib.util
from pathlib import Path
from unittest.mock import MagicMock

import pytest
from botocore.response import StreamingBody

# Add services/ to sys.path so imports work like they do in Docker
SERVICES_DIR = Path(__file__).resolve().parent.parent
if str(SERVICES_DIR) not in sys.path:
    sys.path.insert(0, str(SERVICES_DIR))

os.environ.setdefault("OTEL_SDK_DISABLED", "true")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")

from shared.nova import get_model  # noqa: E402


def streaming_body(data) -> StreamingBody:
    raw = json.dumps(data).encode()
    return StreamingBody(io.BytesIO(raw), len(raw))


def nova_response(content, stop_reason="end_turn", input_tokens=12, output_tokens=7):
    """A Nova ``invoke_model`` response carrying the given content blocks."""
    return {
        "ResponseMetadata": {"HTTPStatusCode": 200},
        "contentType": "application/json",
        "body": streaming_body({
            "output": {"message": {"role": "assistant", "content": content}},
            "stopReason": stop_reason,
            "usage": {
                "inputTokens": input_tokens,
                "outputTokens": output_tokens,
                "totalTokens": input_tokens + output_tokens,
            },
        }),
    }


@pytest.fixture
def nova_pro():
    return get_model("nova-pro")


@pytest.fixture
def bedrock_runtime():
    """Stand-in for a ``bedrock-runtime`` client in us-east-1."""
    client = MagicMock()
    client.meta.region_name = "us-east-1"
    client.invoke_model.side_effect = lambda **kwargs: nova_response([{"text": "Hello"}])
    return client


def sent_body(client) -> dict:
    """Decode the JSON body of the single ``invoke_model`` call."""
    client.invoke_model.assert_called_once()
    return json.loads(client.invoke_model.call_args.kwargs["body"])


@pytest.fixture
def nova_api(monkeypatch, bedrock_runtime):
    """The nova-api service module wired to the fake runtime client."""
    monkeypatch.setenv("VERIFY_MODEL_ACCESS", "false")
    spec = importlib.util.spec_from_file_location(
        "nova_api_main", SERVICES_DIR / "nova-api" / "main.py"
    )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    monkeypatch.setattr(module, "create_bedrock_runtime_client", lambda **kwargs: bedrock_runtime)
    return module

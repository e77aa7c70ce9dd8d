"""Nova API - chat completions on Amazon Bedrock Nova models."""

import os
import time
import uuid
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Optional

from botocore.exceptions import ClientError, ConnectTimeoutError, ReadTimeoutError
from fastapi import FastAPI, Request, HTTPException, Header
from fastapi.responses import JSONResponse

from shared.genai_spans import GenAISpanContext
from shared.health import HealthChecker
from shared.models import ChatRequest, ChatResponse, ToolCallModel
from shared.nova import get_model
from shared.nova_client import NovaModelClient, create_bedrock_runtime_client
from shared.nova_contract import normalize_messages, normalize_tool
from shared.nova_result import NovaResultConverter, NovaResultError, ToolCallResult
from shared.telemetry import setup_telemetry

logger = logging.getLogger(__name__)

SERVICE_NAME = "nova-api"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize and cleanup resources."""
    runtime = create_bedrock_runtime_client(
        region_name=os.getenv("AWS_REGION", "us-east-1"),
        timeout_ms=int(os.getenv("BEDROCK_TIMEOUT_MS", "30000")),
        max_attempts=int(os.getenv("BEDROCK_MAX_ATTEMPTS", "1")),
    )
    app.state.model = get_model(os.getenv("NOVA_MODEL", "nova-pro"))
    app.state.nova = NovaModelClient(runtime)
    app.state.converter = NovaResultConverter()
    app.state.health = HealthChecker(
        app.state.nova,
        app.state.model,
        verify_model_access=os.getenv("VERIFY_MODEL_ACCESS", "true").lower() == "true",
    )
    logger.info(
        "Nova client ready",
        extra={"lab_attributes": {"bedrock.model_id": app.state.nova.get_model_id(app.state.model)}},
    )

    yield


app = FastAPI(
    title="Nova API",
    description="Chat completions on Bedrock Nova models",
    lifespan=lifespan
)

tracer, meter = setup_telemetry(app, SERVICE_NAME, "nova")

predict_counter = meter.create_counter("lab_service_requests_total")
predict_latency = meter.create_histogram("lab_llm_e2e_duration_ms")
bedrock_error_counter = meter.create_counter("lab_service_bedrock_errors_total")


# Health Endpoints
@app.get("/startup")
async def startup():
    """Startup probe - returns 200 when initialization complete."""
    if await app.state.health.startup_check():
        return {"status": "started", "service": SERVICE_NAME}
    raise HTTPException(status_code=503, detail="Service starting")


@app.get("/health")
async def health():
    """Liveness probe - returns 200 if process is alive."""
    if await app.state.health.liveness_check():
        return {"status": "healthy", "service": SERVICE_NAME, "version": os.getenv("SERVICE_VERSION", "1.0.0")}
    raise HTTPException(status_code=500, detail="Service unhealthy")


@app.get("/ready")
async def ready():
    """Readiness probe - returns 200 if ready for traffic."""
    if await app.state.health.readiness_check():
        return {"status": "ready", "service": SERVICE_NAME}
    raise HTTPException(status_code=503, detail="Service not ready")


@app.post("/predict", response_model=ChatResponse)
async def predict(
    request: ChatRequest,
    x_correlation_id: Optional[str] = Header(None, alias="X-Correlation-ID")
):
    """
    Run a chat completion through Bedrock.

    Headers:
        X-Correlation-ID: Request correlation ID (generated if not provided)

    Returns:
        ChatResponse with the model text or requested tool calls
    """
    start_time = time.time()
    correlation_id = x_correlation_id or str(uuid.uuid4())

    try:
        model = get_model(request.model) if request.model else app.state.model
    except ValueError as e:
        raise HTTPException(
            status_code=400,
            detail={
                "error": "unsupported_model",
                "message": str(e),
                "correlation_id": correlation_id
            }
        )

    nova: NovaModelClient = app.state.nova
    model_id = nova.get_model_id(model)

    payload = normalize_messages(request.messages)
    options = {
        "temperature": request.temperature,
        "max_tokens": request.max_tokens,
    }
    if request.tools:
        options["tools"] = [normalize_tool(tool) for tool in request.tools]

    try:
        with GenAISpanContext(
            tracer=tracer,
            operation_name="chat",
            model_name=model.name,
            model_id=model_id,
            correlation_id=correlation_id,
        ) as genai_span:
            genai_span.set_request_options(request.temperature, request.max_tokens)

            # boto3 is blocking
            loop = asyncio.get_running_loop()
            raw = await loop.run_in_executor(
                None,
                lambda: nova.request(model, payload, options)
            )
            result = app.state.converter.convert(raw)

            genai_span.record_completion(
                input_tokens=result.metadata.get("input_tokens", 0),
                output_tokens=result.metadata.get("output_tokens", 0),
                stop_reason=result.metadata.get("stop_reason"),
            )

        latency_ms = (time.time() - start_time) * 1000
        predict_counter.add(1, {"status": "success", "model": model.name})
        predict_latency.record(latency_ms, {"model": model.name})

        if isinstance(result, ToolCallResult):
            output = ""
            tool_calls = [
                ToolCallModel(id=call.id, name=call.name, arguments=call.arguments)
                for call in result.tool_calls
            ]
        else:
            output = result.content
            tool_calls = []

        return ChatResponse(
            output=output,
            tool_calls=tool_calls,
            model_id=model_id,
            stop_reason=result.metadata.get("stop_reason"),
            latency_ms=latency_ms,
            correlation_id=correlation_id
        )

    except (ReadTimeoutError, ConnectTimeoutError) as e:
        predict_counter.add(1, {"status": "timeout", "model": model.name})
        bedrock_error_counter.add(1, {"model": model.name, "error_type": "timeout"})
        raise HTTPException(
            status_code=504,
            detail={
                "error": "bedrock_timeout",
                "message": str(e),
                "correlation_id": correlation_id
            }
        )
    except ClientError as e:
        code = e.response.get("Error", {}).get("Code", "Unknown")
        predict_counter.add(1, {"status": "error", "model": model.name})
        bedrock_error_counter.add(1, {"model": model.name, "error_type": code})
        logger.warning("Bedrock rejected request: %s", code, extra={"correlation_id": correlation_id})
        raise HTTPException(
            status_code=502,
            detail={
                "error": "bedrock_error",
                "code": code,
                "message": str(e),
                "correlation_id": correlation_id
            }
        )
    except NovaResultError as e:
        predict_counter.add(1, {"status": "error", "model": model.name})
        raise HTTPException(
            status_code=502,
            detail={
                "error": "invalid_model_output",
                "message": str(e),
                "correlation_id": correlation_id
            }
        )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    """Global exception handler for unhandled errors."""
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=500,
        content={
            "error": "internal_error",
            "message": str(exc),
            "service": SERVICE_NAME
        }
    )

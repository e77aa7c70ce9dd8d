"""Tests for the service health checker."""

import asyncio
from unittest.mock import MagicMock

from shared.health import HealthChecker, ServiceState
from shared.nova_client import NovaModelClient


def _run(coro):
    return asyncio.run(coro)


def test_startup_waits_for_model_access(nova_pro):
    client = MagicMock()
    client.check_model_access.return_value = False
    checker = HealthChecker(client, nova_pro)

    assert _run(checker.startup_check()) is False
    assert checker.state == ServiceState.STARTING

    client.check_model_access.return_value = True
    assert _run(checker.startup_check()) is True
    assert checker.state == ServiceState.READY
    client.check_model_access.assert_called_with(nova_pro)


def test_readiness_reuses_recent_check(nova_pro):
    client = MagicMock()
    client.check_model_access.return_value = True
    checker = HealthChecker(client, nova_pro)
    _run(checker.startup_check())

    assert _run(checker.readiness_check()) is True
    assert client.check_model_access.call_count == 1


def test_readiness_rechecks_after_interval(nova_pro):
    client = MagicMock()
    client.check_model_access.return_value = True
    checker = HealthChecker(client, nova_pro)
    _run(checker.startup_check())

    checker.last_model_check -= 60
    client.check_model_access.return_value = False

    assert _run(checker.readiness_check()) is False


def test_not_ready_before_startup(nova_pro):
    checker = HealthChecker(MagicMock(), nova_pro)

    assert _run(checker.readiness_check()) is False


def test_without_verification_startup_is_immediate(nova_pro):
    client = MagicMock()
    checker = HealthChecker(client, nova_pro, verify_model_access=False)

    assert _run(checker.startup_check()) is True
    assert _run(checker.readiness_check()) is True
    client.check_model_access.assert_not_called()


def test_liveness():
    assert _run(HealthChecker(None).liveness_check()) is True


def test_model_access_checks_inference_profile(bedrock_runtime, nova_pro):
    bedrock = MagicMock()
    bedrock.get_inference_profile.return_value = {"status": "ACTIVE"}

    assert NovaModelClient(bedrock_runtime, bedrock).check_model_access(nova_pro) is True
    bedrock.get_inference_profile.assert_called_once_with(
        inferenceProfileIdentifier="us.amazon.nova-pro-v1:0"
    )


def test_model_access_failure_is_not_ready(bedrock_runtime, nova_pro):
    bedrock = MagicMock()
    bedrock.get_inference_profile.side_effect = RuntimeError("denied")

    assert NovaModelClient(bedrock_runtime, bedrock).check_model_access(nova_pro) is False

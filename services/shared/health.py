"""Health checks for the Nova inference service."""

from enum import Enum
import asyncio
import time
from typing import Optional

READINESS_RECHECK_SECONDS = 30


class ServiceState(Enum):
    STARTING = "starting"
    READY = "ready"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


class HealthChecker:
    """Tracks service state and whether the Nova model is reachable."""

    def __init__(self, model_client, model=None, verify_model_access: bool = True):
        self.state = ServiceState.STARTING
        self.model_client = model_client
        self.model = model
        self.verify_model_access = verify_model_access
        self.last_model_check: Optional[float] = None
        self.model_reachable: bool = False

    async def _check_model(self) -> bool:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None,
            lambda: self.model_client.check_model_access(self.model)
        )

    async def startup_check(self) -> bool:
        """
        Check if service startup is complete.
        Returns True once the client exists and, when verification is
        enabled, the model's inference profile is active.
        """
        if self.state == ServiceState.STARTING:
            if self.model_client is None:
                return False

            if not self.verify_model_access:
                self.state = ServiceState.READY
                self.model_reachable = True
                return True

            if await self._check_model():
                self.state = ServiceState.READY
                self.model_reachable = True
                self.last_model_check = time.time()
                return True
            return False
        return True

    async def readiness_check(self) -> bool:
        """Ready when started and the model was reachable on the last check."""
        if self.state in (ServiceState.STARTING, ServiceState.UNHEALTHY):
            return False

        if not self.verify_model_access:
            return self.state == ServiceState.READY

        now = time.time()
        if self.last_model_check is None or (now - self.last_model_check) > READINESS_RECHECK_SECONDS:
            self.model_reachable = await self._check_model()
            self.last_model_check = now

        return self.model_reachable and self.state == ServiceState.READY

    async def liveness_check(self) -> bool:
        """Alive while the event loop keeps scheduling."""
        await asyncio.sleep(0)
        return True

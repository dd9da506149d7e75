"""
SimulatedDeployer - IDeployer 구현체 (deploy hook 미설정 환경)

고정 시간 대기 후 project/environment 기반 URL 반환.
"""
from __future__ import annotations

import re
import time
from typing import Any, Callable, Dict

from src.application.ports.deployer import DeploymentResult, IDeployer

DEFAULT_DOMAIN = "snapinfra.app"


def _slug(value: str) -> str:
    return re.sub(r"[^a-z0-9-]+", "-", value.lower()).strip("-") or "app"


class SimulatedDeployer(IDeployer):
    def __init__(
        self,
        delay_seconds: float = 5.0,
        domain: str = DEFAULT_DOMAIN,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._delay = float(delay_seconds)
        self._domain = domain
        self._sleep = sleep

    def deploy(self, project_id: str, environment: str, config: Dict[str, Any]) -> DeploymentResult:
        if self._delay > 0:
            self._sleep(self._delay)
        host = _slug(project_id)
        if environment != "production":
            host = f"{host}-{_slug(environment)}"
        return DeploymentResult(url=f"https://{host}.{self._domain}")

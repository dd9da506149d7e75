"""
WebhookDeployer - IDeployer 구현체

설정된 deploy hook으로 배포 요청을 POST 하고, 응답의 url을 배포 URL로 사용.
요청 타임아웃 명시, 재시도 없음 (큐 재전달 정책에 맡김).
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from src.application.ports.deployer import DeploymentResult, IDeployer

logger = logging.getLogger(__name__)


class DeploymentError(RuntimeError):
    pass


class WebhookDeployer(IDeployer):
    def __init__(
        self,
        webhook_url: str,
        timeout_seconds: float = 300.0,
        token: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        if not webhook_url:
            raise ValueError("webhook_url is required")
        self._url = webhook_url
        self._timeout = float(timeout_seconds)
        self._session = session or requests.Session()
        self._headers = {"Content-Type": "application/json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    def deploy(self, project_id: str, environment: str, config: Dict[str, Any]) -> DeploymentResult:
        try:
            resp = self._session.post(
                self._url,
                json={"project_id": project_id, "environment": environment, "config": config or {}},
                headers=self._headers,
                timeout=self._timeout,
            )
        except requests.Timeout as e:
            raise DeploymentError("connection timeout") from e
        except requests.RequestException as e:
            raise DeploymentError(f"deploy request failed: {e}") from e

        if resp.status_code >= 400:
            detail = (resp.text or "").strip()[:500]
            raise DeploymentError(f"deploy hook returned {resp.status_code}: {detail}".strip())

        try:
            body = resp.json()
        except ValueError as e:
            raise DeploymentError("deploy hook returned a non-JSON response") from e

        url = body.get("url") if isinstance(body, dict) else None
        if not url:
            raise DeploymentError("deploy hook response missing url")
        return DeploymentResult(url=str(url))

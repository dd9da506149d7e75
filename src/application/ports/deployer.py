"""
Deployer Port (인터페이스)

배포 실행. 성공 시 배포 URL 반환, 실패 시 예외.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class DeploymentResult:
    url: str


class IDeployer(ABC):
    @abstractmethod
    def deploy(self, project_id: str, environment: str, config: Dict[str, Any]) -> DeploymentResult:
        pass

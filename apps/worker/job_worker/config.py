# PATH: apps/worker/job_worker/config.py
"""Job 워커 설정: 환경변수만 사용 (.env 파일이 있으면 먼저 로드)"""

from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


def _require(name: str) -> str:
    v = os.environ.get(name)
    if not v:
        raise RuntimeError(f"Missing required env: {name}")
    return v


def _optional(name: str, default: str = "") -> str:
    return os.environ.get(name, default).strip()


def _float(name: str, default: str) -> float:
    try:
        return float(os.environ.get(name, default))
    except ValueError:
        return float(default)


def _int(name: str, default: str) -> int:
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return int(default)


@dataclass(frozen=True)
class Config:
    AWS_REGION: str

    # SQS (이름 또는 전체 URL)
    SQS_CODE_GENERATION_QUEUE: str
    SQS_DEPLOYMENT_QUEUE: str
    SQS_WAIT_TIME_SECONDS: int
    SQS_MAX_MESSAGES: int

    # Polling backoff
    EMPTY_POLL_BACKOFF_SECONDS: float
    ERROR_BACKOFF_SECONDS: float

    # DynamoDB (Job Record Store)
    DYNAMODB_CODE_GENERATIONS_TABLE: str
    DYNAMODB_DEPLOYMENTS_TABLE: str

    # S3 (Blob Store)
    S3_BUCKET_NAME: str
    PRESIGN_DOWNLOAD_EXPIRES: int

    # SNS (비어 있으면 SNS 채널 비활성화)
    SNS_DEPLOYMENT_NOTIFICATIONS: str

    # LLM
    OPENAI_API_KEY: str
    OPENAI_MODEL: str

    # 배포 (DEPLOY_WEBHOOK_URL 미설정 시 SimulatedDeployer)
    DEPLOY_WEBHOOK_URL: str
    DEPLOY_WEBHOOK_TOKEN: str
    DEPLOY_TIMEOUT_SECONDS: float
    SIMULATED_DEPLOY_SECONDS: float

    LOG_LEVEL: str


def load_config(env_file: Optional[str] = None) -> Config:
    load_dotenv(env_file, override=False)
    try:
        return Config(
            AWS_REGION=_optional("AWS_REGION", "us-east-1"),
            SQS_CODE_GENERATION_QUEUE=_optional("SQS_CODE_GENERATION_QUEUE", "snapinfra-code-generation"),
            SQS_DEPLOYMENT_QUEUE=_optional("SQS_DEPLOYMENT_QUEUE", "snapinfra-deployments"),
            # SQS Long Polling 최대 20초
            SQS_WAIT_TIME_SECONDS=min(20, _int("SQS_WAIT_TIME_SECONDS", "20")),
            SQS_MAX_MESSAGES=max(1, min(10, _int("SQS_MAX_MESSAGES", "5"))),
            EMPTY_POLL_BACKOFF_SECONDS=_float("EMPTY_POLL_BACKOFF_SECONDS", "1"),
            ERROR_BACKOFF_SECONDS=_float("ERROR_BACKOFF_SECONDS", "5"),
            DYNAMODB_CODE_GENERATIONS_TABLE=_optional("DYNAMODB_CODE_GENERATIONS_TABLE", "snapinfra-code-generations"),
            DYNAMODB_DEPLOYMENTS_TABLE=_optional("DYNAMODB_DEPLOYMENTS_TABLE", "snapinfra-deployments"),
            S3_BUCKET_NAME=_optional("S3_BUCKET_NAME", "snapinfra-storage"),
            PRESIGN_DOWNLOAD_EXPIRES=_int("PRESIGN_DOWNLOAD_EXPIRES", "3600"),
            SNS_DEPLOYMENT_NOTIFICATIONS=_optional("SNS_DEPLOYMENT_NOTIFICATIONS"),
            OPENAI_API_KEY=_require("OPENAI_API_KEY"),
            OPENAI_MODEL=_optional("OPENAI_MODEL", "gpt-4o-mini"),
            DEPLOY_WEBHOOK_URL=_optional("DEPLOY_WEBHOOK_URL"),
            DEPLOY_WEBHOOK_TOKEN=_optional("DEPLOY_WEBHOOK_TOKEN"),
            DEPLOY_TIMEOUT_SECONDS=_float("DEPLOY_TIMEOUT_SECONDS", "300"),
            SIMULATED_DEPLOY_SECONDS=_float("SIMULATED_DEPLOY_SECONDS", "5"),
            LOG_LEVEL=_optional("LOG_LEVEL", "INFO").upper(),
        )
    except RuntimeError as e:
        logging.basicConfig(level=logging.INFO)
        logging.getLogger(__name__).critical("config error: %s", e)
        sys.exit(1)

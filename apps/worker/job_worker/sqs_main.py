"""
Job Worker - SQS 기반 메인 엔트리포인트

job family별 큐 2개 (code-generation, deployment)를 각자의 스레드에서 Long Polling.
두 루프는 가변 상태를 공유하지 않는다 (큐/저장소/handler 인스턴스 모두 루프별 생성).
SIGTERM/SIGINT → stop token set → 처리 중인 job 완료 후 종료.
"""

from __future__ import annotations

import logging
import sys
import threading
from typing import List

from apps.worker.job_worker.config import Config, load_config
from apps.worker.job_worker.loop import JobWorkerLoop
from libs.observability.shutdown import install_stop_signals
from libs.queue import get_queue_client
from src.application.jobs import CodeGenerationJobHandler, DeploymentJobHandler, JobDispatcher
from src.application.ports.deployer import IDeployer
from src.application.ports.notifier import INotifier
from src.infrastructure.ai.openai_code_generator import OpenAICodeGenerator
from src.infrastructure.db.dynamodb_job_repository import DynamoJobRepository
from src.infrastructure.deploy import SimulatedDeployer, WebhookDeployer
from src.infrastructure.notify import CompositeNotifier, RedisNotifier, SNSNotifier
from src.infrastructure.queue import JobSQSQueue
from src.infrastructure.storage import S3BlobStorageAdapter

logger = logging.getLogger("job_worker_sqs")

JOIN_POLL_SECONDS = 1.0


def _configure_logging(cfg: Config) -> None:
    logging.basicConfig(
        level=getattr(logging, cfg.LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(levelname)s] [JOB-WORKER] [%(threadName)s] %(message)s",
    )


def build_notifier(cfg: Config) -> INotifier:
    channels: List[INotifier] = [RedisNotifier()]
    if cfg.SNS_DEPLOYMENT_NOTIFICATIONS:
        channels.append(SNSNotifier(cfg.SNS_DEPLOYMENT_NOTIFICATIONS, region_name=cfg.AWS_REGION))
    else:
        logger.info("SNS_DEPLOYMENT_NOTIFICATIONS not set, SNS notifications disabled")
    return CompositeNotifier(channels)


def build_deployer(cfg: Config) -> IDeployer:
    if cfg.DEPLOY_WEBHOOK_URL:
        return WebhookDeployer(
            cfg.DEPLOY_WEBHOOK_URL,
            timeout_seconds=cfg.DEPLOY_TIMEOUT_SECONDS,
            token=cfg.DEPLOY_WEBHOOK_TOKEN or None,
        )
    logger.info("DEPLOY_WEBHOOK_URL not set, using SimulatedDeployer (%ss)", cfg.SIMULATED_DEPLOY_SECONDS)
    return SimulatedDeployer(delay_seconds=cfg.SIMULATED_DEPLOY_SECONDS)


def _loop(cfg: Config, queue_name: str, handler, name: str) -> JobWorkerLoop:
    return JobWorkerLoop(
        JobSQSQueue(queue_name, client=get_queue_client(cfg.AWS_REGION)),
        JobDispatcher([handler]),
        name=name,
        max_messages=cfg.SQS_MAX_MESSAGES,
        wait_time_seconds=cfg.SQS_WAIT_TIME_SECONDS,
        empty_backoff_seconds=cfg.EMPTY_POLL_BACKOFF_SECONDS,
        error_backoff_seconds=cfg.ERROR_BACKOFF_SECONDS,
    )


def build_worker_loops(cfg: Config) -> List[JobWorkerLoop]:
    code_generation = CodeGenerationJobHandler(
        repo=DynamoJobRepository(cfg.DYNAMODB_CODE_GENERATIONS_TABLE, region_name=cfg.AWS_REGION),
        notifier=build_notifier(cfg),
        generator=OpenAICodeGenerator(api_key=cfg.OPENAI_API_KEY, model=cfg.OPENAI_MODEL),
        storage=S3BlobStorageAdapter(cfg.S3_BUCKET_NAME, region_name=cfg.AWS_REGION),
        download_url_expires=cfg.PRESIGN_DOWNLOAD_EXPIRES,
    )
    deployment = DeploymentJobHandler(
        repo=DynamoJobRepository(cfg.DYNAMODB_DEPLOYMENTS_TABLE, region_name=cfg.AWS_REGION),
        notifier=build_notifier(cfg),
        deployer=build_deployer(cfg),
    )
    return [
        _loop(cfg, cfg.SQS_CODE_GENERATION_QUEUE, code_generation, "code-generation"),
        _loop(cfg, cfg.SQS_DEPLOYMENT_QUEUE, deployment, "deployment"),
    ]


def run_loops(loops: List[JobWorkerLoop], stop_event: threading.Event) -> bool:
    """
    루프별 스레드 시작 후 전부 끝날 때까지 대기 (메인 스레드는 시그널 처리를 위해 짧게 join)

    stop 없이 종료된 루프가 있으면 나머지도 멈추고 False 반환 (supervisor 재시작 대상).
    """
    threads = [
        threading.Thread(target=loop.run, args=(stop_event,), name=f"loop-{loop.name}", daemon=False)
        for loop in loops
    ]
    for t in threads:
        t.start()
    healthy = True
    while any(t.is_alive() for t in threads):
        for t in threads:
            t.join(timeout=JOIN_POLL_SECONDS)
            if healthy and not t.is_alive() and not stop_event.is_set():
                logger.critical("Job worker loop exited unexpectedly | thread=%s | stopping worker", t.name)
                healthy = False
                stop_event.set()
    if healthy and not stop_event.is_set():
        logger.critical("All job worker loops exited without a stop signal")
        healthy = False
    return healthy


def main() -> int:
    cfg = load_config()
    _configure_logging(cfg)

    stop_event = threading.Event()
    install_stop_signals(stop_event)

    try:
        loops = build_worker_loops(cfg)
    except Exception:
        logger.exception("Fatal error while building Job Worker")
        return 1

    logger.info(
        "Job Worker (SQS) started | queues=%s,%s | region=%s",
        cfg.SQS_CODE_GENERATION_QUEUE,
        cfg.SQS_DEPLOYMENT_QUEUE,
        cfg.AWS_REGION,
    )
    if not run_loops(loops, stop_event):
        logger.critical("Job Worker stopped after a loop failure")
        return 1
    logger.info("Job Worker shutdown complete")
    return 0


if __name__ == "__main__":
    sys.exit(main())

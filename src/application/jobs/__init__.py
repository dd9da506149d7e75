# Job Processor 유스케이스 (job 타입별 handler + dispatcher)

from src.application.jobs.code_generation import CodeGenerationJobHandler
from src.application.jobs.deployment import DeploymentJobHandler
from src.application.jobs.handler import JobDispatcher, JobHandler

__all__ = [
    "CodeGenerationJobHandler",
    "DeploymentJobHandler",
    "JobDispatcher",
    "JobHandler",
]

from src.infrastructure.queue.sqs_adapter import JobSQSQueue

__all__ = ["JobSQSQueue"]

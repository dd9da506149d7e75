from src.infrastructure.deploy.simulated_deployer import SimulatedDeployer
from src.infrastructure.deploy.webhook_deployer import DeploymentError, WebhookDeployer

__all__ = ["DeploymentError", "SimulatedDeployer", "WebhookDeployer"]

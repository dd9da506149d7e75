from unittest.mock import MagicMock

import pytest
import requests

from src.infrastructure.deploy import DeploymentError, SimulatedDeployer, WebhookDeployer


def test_simulated_deployer_urls():
    sleeps = []
    deployer = SimulatedDeployer(delay_seconds=5, sleep=sleeps.append)

    assert deployer.deploy("My Shop", "production", {}).url == "https://my-shop.snapinfra.app"
    assert deployer.deploy("My Shop", "staging", {}).url == "https://my-shop-staging.snapinfra.app"
    assert sleeps == [5.0, 5.0]


def _response(status_code=200, body=None, text=""):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = text
    if isinstance(body, Exception):
        resp.json.side_effect = body
    else:
        resp.json.return_value = body
    return resp


def test_webhook_deployer_returns_url():
    session = MagicMock()
    session.post.return_value = _response(body={"url": "https://proj-1.snapinfra.app"})

    result = WebhookDeployer("https://deploy.internal/hook", token="t0k", session=session, timeout_seconds=30).deploy(
        "proj-1", "production", {"replicas": 2}
    )

    assert result.url == "https://proj-1.snapinfra.app"
    kwargs = session.post.call_args.kwargs
    assert kwargs["json"] == {"project_id": "proj-1", "environment": "production", "config": {"replicas": 2}}
    assert kwargs["headers"]["Authorization"] == "Bearer t0k"
    assert kwargs["timeout"] == 30.0


def test_webhook_timeout_is_connection_timeout():
    session = MagicMock()
    session.post.side_effect = requests.Timeout("read timed out")

    with pytest.raises(DeploymentError, match="^connection timeout$"):
        WebhookDeployer("https://deploy.internal/hook", session=session).deploy("p", "production", {})


@pytest.mark.parametrize(
    "resp",
    [
        _response(status_code=502, text="bad gateway"),
        _response(body=ValueError("no json")),
        _response(body={"status": "ok"}),
    ],
)
def test_webhook_bad_responses_raise(resp):
    session = MagicMock()
    session.post.return_value = resp

    with pytest.raises(DeploymentError):
        WebhookDeployer("https://deploy.internal/hook", session=session).deploy("p", "staging", {})

import json
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from src.infrastructure.ai.openai_code_generator import OpenAICodeGenerator


def _client(content):
    client = MagicMock()
    client.chat.completions.create.return_value = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=content))]
    )
    return client


def test_api_prompt_produces_route_and_controller():
    client = _client(json.dumps({"routes": "export const routes = [];", "controller": "export class C {}"}))

    files = OpenAICodeGenerator(client=client, model="gpt-4o-mini").generate("api", "todo api")

    assert [f.path for f in files] == ["routes/api.ts", "controllers/apiController.ts"]
    assert files[0].content == "export const routes = [];"
    assert all(f.language == "typescript" for f in files)

    kwargs = client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["response_format"] == {"type": "json_object"}
    assert kwargs["messages"][1] == {"role": "user", "content": "todo api"}


def test_full_stack_missing_section_gets_placeholder():
    client = _client(json.dumps({"frontend": "<App />", "routes": "r", "controller": "c"}))

    files = OpenAICodeGenerator(client=client).generate("full-stack", "shop")

    assert len(files) == 4
    assert files[-1].path == "backend/models/index.ts"
    assert files[-1].content == "// Generated model"


def test_invalid_json_raises():
    with pytest.raises(RuntimeError, match="invalid JSON"):
        OpenAICodeGenerator(client=_client("not json")).generate("model", "users")


def test_unknown_prompt_type_raises_before_calling_llm():
    client = _client("{}")

    with pytest.raises(ValueError):
        OpenAICodeGenerator(client=client).generate("graphql", "x")

    client.chat.completions.create.assert_not_called()


def test_api_error_propagates():
    client = MagicMock()
    client.chat.completions.create.side_effect = TimeoutError("request timed out")

    with pytest.raises(TimeoutError):
        OpenAICodeGenerator(client=client).generate("service", "billing")

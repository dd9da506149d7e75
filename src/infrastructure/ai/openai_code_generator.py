"""
OpenAICodeGenerator - ICodeGenerator 구현체

prompt_type별 system prompt로 LLM을 1회 호출하고 JSON 응답을 파일 목록으로 변환.
응답 JSON 키: routes, controller, model, service, frontend (타입별로 필요한 것만 사용)
재시도 없음: 실패는 그대로 올려보내 job 실패/큐 재전달 정책에 맡긴다.
"""
from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Optional, Tuple

from src.application.ports.code_generator import PROMPT_TYPES, GeneratedFile, ICodeGenerator

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gpt-4o-mini"

_SYSTEM_PROMPTS: Dict[str, str] = {
    "api": (
        "You are an expert backend developer. Generate RESTful API endpoints based on the user "
        "requirements. Include route definitions, controller logic, and validation."
    ),
    "model": (
        "You are an expert in database modeling. Generate database models and schemas based on the "
        "requirements. Include TypeScript interfaces and database schemas."
    ),
    "controller": (
        "You are an expert backend developer. Generate controller logic with proper error handling, "
        "validation, and business logic."
    ),
    "service": (
        "You are an expert backend developer. Generate service layer code with business logic and "
        "external integrations."
    ),
    "full-stack": (
        "You are an expert full-stack developer. Generate complete application code including frontend "
        "components, backend APIs, models, and database schemas."
    ),
}

# prompt_type -> [(응답 키, 파일 경로)]
_OUTPUT_FILES: Dict[str, List[Tuple[str, str]]] = {
    "api": [("routes", "routes/api.ts"), ("controller", "controllers/apiController.ts")],
    "model": [("model", "models/index.ts")],
    "controller": [("controller", "controllers/controller.ts")],
    "service": [("service", "services/service.ts")],
    "full-stack": [
        ("frontend", "frontend/components/App.tsx"),
        ("routes", "backend/routes/api.ts"),
        ("controller", "backend/controllers/controller.ts"),
        ("model", "backend/models/index.ts"),
    ],
}


def _response_instructions(prompt_type: str) -> str:
    keys = ", ".join(f'"{k}"' for k, _ in _OUTPUT_FILES[prompt_type])
    return (
        f"Respond with a single JSON object with the keys {keys}. "
        "Each value is the complete TypeScript source for that part as a string."
    )


class OpenAICodeGenerator(ICodeGenerator):
    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        client: Any = None,
        timeout_seconds: float = 120.0,
    ) -> None:
        if client is None:
            from openai import OpenAI

            if not api_key:
                raise RuntimeError("OPENAI_API_KEY not set")
            client = OpenAI(api_key=api_key, timeout=timeout_seconds, max_retries=0)
        self._client = client
        self._model = model

    def generate(self, prompt_type: str, prompt: str) -> List[GeneratedFile]:
        if prompt_type not in PROMPT_TYPES:
            raise ValueError(f"Unsupported prompt type: {prompt_type}")

        response = self._client.chat.completions.create(
            model=self._model,
            messages=[
                {
                    "role": "system",
                    "content": f"{_SYSTEM_PROMPTS[prompt_type]} {_response_instructions(prompt_type)}",
                },
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
        )
        content = response.choices[0].message.content or "{}"
        try:
            sections = json.loads(content)
        except ValueError as e:
            raise RuntimeError(f"code generator returned invalid JSON: {e}") from e
        if not isinstance(sections, dict):
            raise RuntimeError("code generator returned a non-object JSON payload")

        files = []
        for key, path in _OUTPUT_FILES[prompt_type]:
            source = sections.get(key)
            if not isinstance(source, str) or not source.strip():
                logger.warning("LLM response missing section=%s prompt_type=%s", key, prompt_type)
                source = f"// Generated {key}"
            files.append(GeneratedFile(path=path, content=source, language="typescript"))
        return files

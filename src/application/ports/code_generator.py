"""
Code Generator Port (인터페이스)

외부 LLM 호출. 실패 시 예외를 그대로 던진다 (processor 내부 재시도 없음).
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass
from typing import Any, Dict, List, Literal

PromptType = Literal["api", "model", "controller", "service", "full-stack"]

PROMPT_TYPES = ("api", "model", "controller", "service", "full-stack")


@dataclass(frozen=True)
class GeneratedFile:
    path: str
    content: str
    language: str = "typescript"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class ICodeGenerator(ABC):
    @abstractmethod
    def generate(self, prompt_type: str, prompt: str) -> List[GeneratedFile]:
        pass

from __future__ import annotations
import logging, time
from typing import Any, Optional, Protocol

from .llm_cfg import LLMSettings, client as llm_client, settings as llm_settings

log = logging.getLogger(__name__)

_SYSTEM = (
    "You are an expert quiz question creator. Your responses must be a single, valid JSON "
    "object with a \"questions\" key containing an array of questions."
)


class QuestionGenerator(Protocol):
    def generate_questions(self, topic: str, count: int, difficulty: str, category: str) -> Any: ...


def build_prompt(topic: str, count: int, difficulty: str, category: str) -> str:
    return (
        f"Generate {count} multiple-choice questions about \"{topic}\".\n"
        f"The difficulty level for all questions should be \"{difficulty}\".\n"
        f"Each question must be in the \"{category}\" category.\n\n"
        "Provide the output as a JSON object with a single key named \"questions\" holding an "
        "array of question objects. Each object must have the keys: "
        "\"text\" (the question), \"options\" (array of four answer strings), "
        "\"correctAnswer\" (0-based index of the correct option), "
        f"\"difficulty\" (\"{difficulty}\"), \"category\" (\"{category}\"), "
        "\"tags\" (array of short strings) and \"explanation\" (one sentence).\n"
        "Do not include any text or formatting outside of the JSON object."
    )


class TextGenerator:
    """Question generation over an OpenAI-compatible chat completions API.

    Returns the raw message content; the caller validates it. Transport and
    configuration errors propagate.
    """

    def __init__(self, cfg: Optional[LLMSettings] = None, cli: Any = None, max_tokens: int = 2048):
        self._cfg = cfg
        self._cli = cli
        self.max_tokens = max_tokens

    @property
    def cfg(self) -> LLMSettings:
        if self._cfg is None:
            self._cfg = llm_settings()
        return self._cfg

    @property
    def cli(self) -> Any:
        if self._cli is None:
            self._cli = llm_client(self.cfg)
        return self._cli

    def generate_questions(self, topic: str, count: int, difficulty: str, category: str) -> str:
        t0 = time.time()
        resp = self.cli.chat.completions.create(
            model=self.cfg.model,
            messages=[
                {"role": "system", "content": _SYSTEM},
                {"role": "user", "content": build_prompt(topic, count, difficulty, category)},
            ],
            response_format={"type": "json_object"},
            max_tokens=self.max_tokens,
        )
        content = resp.choices[0].message.content or ""
        log.info(
            "generated backend=%s topic=%s count=%d difficulty=%s chars=%d rt_ms=%d",
            self.cfg.backend, topic, count, difficulty, len(content), int((time.time() - t0) * 1000),
        )
        return content

# quiz_core/llm_cfg.py
from __future__ import annotations
import os, json, pathlib
from dataclasses import dataclass
from typing import Union

from openai import AzureOpenAI, OpenAI

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
OPENROUTER_DEFAULT_MODEL = "openai/gpt-4o"


@dataclass(frozen=True)
class LLMSettings:
    backend: str
    api_key: str
    model: str
    endpoint: str = ""
    api_version: str = ""


def backend_in_use() -> str:
    b = (os.getenv("LLM_BACKEND") or "").lower().strip()
    return b if b in ("azure", "openrouter") else "none"


def _from_env(backend: str) -> dict[str, str]:
    if backend == "azure":
        return {
            "endpoint":   os.getenv("AZURE_OPENAI_ENDPOINT", ""),
            "api_key":    os.getenv("AZURE_OPENAI_API_KEY", ""),
            "api_version":os.getenv("AZURE_OPENAI_API_VERSION", ""),
            "model":      os.getenv("AZURE_OPENAI_DEPLOYMENT", ""),
        }
    return {
        "api_key": os.getenv("OPENROUTER_API_KEY", ""),
        "model":   os.getenv("OPENROUTER_MODEL", OPENROUTER_DEFAULT_MODEL),
    }


def _from_json(backend: str, path: str = ".llm_config.json") -> dict[str, str]:
    p = pathlib.Path(path)
    if not p.exists(): return {}
    try:
        j = json.loads(p.read_text(encoding="utf-8")).get(backend) or {}
    except ValueError:
        return {}
    return {k: str(v) for k, v in j.items() if k in ("endpoint", "api_key", "api_version", "model")}


def settings() -> LLMSettings:
    backend = backend_in_use()
    if backend == "none":
        raise RuntimeError("No LLM backend configured. Set LLM_BACKEND to 'openrouter' or 'azure'.")
    cfg = _from_env(backend)
    if not all(cfg.values()):
        for k, v in _from_json(backend).items():
            if not cfg.get(k): cfg[k] = v
    missing = [k for k, v in cfg.items() if not v]
    if missing:
        raise RuntimeError(f"{backend} LLM backend not configured. Missing: {', '.join(missing)}")
    return LLMSettings(
        backend=backend,
        api_key=cfg["api_key"],
        model=cfg["model"],
        endpoint=cfg.get("endpoint", ""),
        api_version=cfg.get("api_version", ""),
    )


def client(s: LLMSettings | None = None) -> Union[OpenAI, AzureOpenAI]:
    s = s or settings()
    if s.backend == "azure":
        return AzureOpenAI(
            azure_endpoint=s.endpoint,
            api_key=s.api_key,
            api_version=s.api_version,
        )
    return OpenAI(base_url=OPENROUTER_BASE_URL, api_key=s.api_key)

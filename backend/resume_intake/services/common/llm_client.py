# resume_intake/services/common/llm_client.py
"""Unified completion client for OpenAI-compatible services (OpenAI, OpenRouter) and Ollama:
plain-text chat completions at temperature 0, prompt loading, and provider abstraction."""
from __future__ import annotations
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import requests
from openai import OpenAI, APIConnectionError, APIStatusError, APIError

from resume_intake.core.config import settings
from resume_intake.core.errors import ModelUnavailable

logger = logging.getLogger("ai.llm")


# Default Ollama chat options (deterministic sampling)
DEFAULT_CHAT_OPTIONS: Dict[str, Any] = {
    "temperature": 0,
    "num_ctx": 8192,
}


def _require_api_key() -> str:
    """Ensure an API key is configured; raise a clear error otherwise."""
    if not settings.OPENAI_API_KEY:
        raise ModelUnavailable("OPENAI_API_KEY is not set. Add it to .env to use AI resume parsing.")
    return settings.OPENAI_API_KEY


def _build_openai_client() -> OpenAI:
    api_key = _require_api_key()
    return OpenAI(
        api_key=api_key,
        base_url=settings.OPENAI_BASE_URL or None,
        default_headers={"HTTP-Referer": settings.OPENAI_HTTP_REFERER},
    )


def _build_ollama_chat_url() -> str:
    """Build the Ollama chat endpoint URL."""
    if not settings.OLLAMA_BASE_URL:
        raise ModelUnavailable("OLLAMA_BASE_URL is not set. Please add it to your environment or .env file.")
    return f"{settings.OLLAMA_BASE_URL.rstrip('/')}/api/chat"


def load_prompt(relative_path: str) -> str:
    """
    Load a prompt file from resume_intake/prompts/<relative_path>.
    If the exact relative path is not found, also try by basename under prompts/.
    """
    base = Path(__file__).resolve().parents[2] / "prompts"
    path = base / relative_path
    if path.exists():
        text = path.read_text(encoding="utf-8")
        logger.debug("Loaded prompt: %s (%d chars)", relative_path, len(text))
        return text
    alt = base / Path(relative_path).name
    if alt.exists():
        text = alt.read_text(encoding="utf-8")
        logger.debug("Loaded prompt by basename fallback: %s (%d chars)", alt.name, len(text))
        return text
    raise FileNotFoundError(f"Prompt file not found. Tried: {path} and {alt}")


class LLMClient:
    """
    Wrapper over the configured completion backend.

    Provider selection:
      - If LLM_CHAT_MODEL is set -> Ollama
      - Otherwise -> OpenAI-compatible API (OPENAI_BASE_URL, OpenRouter by default)

    Credentials are checked on first use so that a missing key is reported as
    ModelUnavailable for the request instead of failing at import.
    """

    def __init__(self, model: Optional[str] = None, provider: Optional[str] = None):
        self.provider = (provider or settings.llm_provider).lower()
        if self.provider == "ollama":
            self.model = model or settings.LLM_CHAT_MODEL or "llama3.2"
        elif self.provider == "openai":
            self.model = model or settings.OPENAI_MODEL
        else:
            raise ValueError(f"Unknown provider: {self.provider}")
        self._openai: Optional[OpenAI] = None
        logger.info("LLM client configured: provider=%s model=%s", self.provider, self.model)

    def chat_text(
        self,
        messages: List[Dict[str, str]],
        timeout: Optional[int] = None,
        *,
        temperature: float = 0,
    ) -> str:
        """Run a chat completion and return the raw text of the first choice."""
        timeout = timeout or settings.LLM_TIMEOUT_S
        if self.provider == "ollama":
            return self._chat_text_ollama(messages, timeout, temperature=temperature)
        return self._chat_text_openai(messages, timeout, temperature=temperature)

    # ===== Ollama Implementation =====
    def _chat_text_ollama(self, messages: List[Dict[str, str]], timeout: int, *, temperature: float) -> str:
        options = DEFAULT_CHAT_OPTIONS.copy()
        options["temperature"] = temperature
        payload = {
            "model": self.model,
            "messages": messages,
            "stream": False,
            "options": options,
            "keep_alive": "30m",
        }
        chat_url = _build_ollama_chat_url()
        try:
            response = requests.post(chat_url, json=payload, timeout=timeout)
            response.raise_for_status()
            data = response.json()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            body = e.response.text if e.response is not None else ""
            logger.error("Ollama API error: %s %s", status, body[:500])
            raise ModelUnavailable(f"Ollama API error: {status} {body}", status_code=502, upstream_status=status) from e
        except (requests.RequestException, ValueError) as e:
            logger.error("Ollama request failed: %s", e)
            raise ModelUnavailable(f"Ollama request failed: {e}", status_code=502) from e

        message = data.get("message") if isinstance(data, dict) else None
        content = message.get("content") if isinstance(message, dict) else None
        if not isinstance(content, str):
            raise ModelUnavailable("Ollama returned no content", status_code=502)
        logger.debug("Ollama chat_text received %d chars", len(content))
        return content

    # ===== OpenAI Implementation =====
    def _get_openai(self) -> OpenAI:
        if self._openai is None:
            self._openai = _build_openai_client()
            logger.info("OpenAI client initialized (base_url=%s)", settings.OPENAI_BASE_URL or "default")
        return self._openai

    def _chat_text_openai(self, messages: List[Dict[str, str]], timeout: int, *, temperature: float) -> str:
        client = self._get_openai()
        try:
            resp = client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=temperature,
                timeout=timeout,
            )
        except APIStatusError as e:
            logger.error("Completion API error: %s %s", e.status_code, e.message)
            raise ModelUnavailable(
                f"Completion API error: {e.status_code} {e.message}",
                status_code=502,
                upstream_status=e.status_code,
            ) from e
        except (APIConnectionError, APIError) as e:
            logger.error("Completion API request failed: %s", e)
            raise ModelUnavailable(f"Completion API request failed: {e}", status_code=502) from e

        content = resp.choices[0].message.content if resp.choices else None
        if not isinstance(content, str):
            raise ModelUnavailable("Completion API returned no content", status_code=502)
        logger.debug("OpenAI chat_text received %d chars", len(content))
        return content


# Per-process client, created on first use
_default_client: Optional[LLMClient] = None


def get_llm_client() -> LLMClient:
    global _default_client
    if _default_client is None:
        _default_client = LLMClient()
    return _default_client

# resume_intake/core/config.py
from __future__ import annotations
from pathlib import Path
from pydantic_settings import BaseSettings
from pydantic import Field

# Resolve the .env alongside the backend package root (adjust if your layout differs)
ENV_PATH = Path(__file__).resolve().parent.parent / ".env"


class Settings(BaseSettings):

    # --- App info ---
    APP_NAME: str = Field(default="Resume Intake Backend")

    # --- Completion service (OpenAI-compatible, e.g. OpenRouter) ---
    OPENAI_API_KEY: str | None = Field(default=None, description="API key for the OpenAI-compatible completion service")
    OPENAI_MODEL: str = Field(default="stepfun/step-3.5-flash:free", description="Model used for resume extraction")
    OPENAI_BASE_URL: str | None = Field(
        default="https://openrouter.ai/api/v1",
        description="Base URL of the OpenAI-compatible API. Set to empty to use api.openai.com.",
    )
    OPENAI_HTTP_REFERER: str = Field(default="http://localhost:3000", description="Sent as HTTP-Referer (OpenRouter attribution)")

    # --- Local Ollama provider (selected when LLM_CHAT_MODEL is set) ---
    OLLAMA_BASE_URL: str | None = Field(default=None, description="Base URL of local Ollama server")
    LLM_CHAT_MODEL: str | None = Field(default=None, description="Ollama model used for resume extraction")

    LLM_TIMEOUT_S: int = Field(default=90, ge=1)

    # --- Tenant field-schema service ---
    API_BASE_URL: str = Field(default="http://localhost:8080", description="Backend that owns custom field definitions")
    CUSTOM_FIELDS_TIMEOUT_S: int = Field(default=15, ge=1)
    RESUME_ENTITY_TYPE: str = Field(default="job-seekers")

    # --- Document text ---
    MAX_RESUME_CHARS: int = Field(default=100_000, ge=1, description="Byte cap when decoding DOC/RTF binaries as text")

    class Config:
        env_file = str(ENV_PATH)
        case_sensitive = True
        extra = "ignore"

    @property
    def llm_provider(self) -> str:
        """'ollama' when a local chat model is configured, else 'openai'."""
        return "ollama" if self.LLM_CHAT_MODEL else "openai"


settings = Settings()

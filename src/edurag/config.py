"""Application settings loaded from YAML with environment variable overrides."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator

# ---------------------------------------------------------------------------
# Settings sections
# ---------------------------------------------------------------------------


class EmbeddingSettings(BaseModel):
    primary_provider: str = "openai"
    primary_model: str = "text-embedding-3-small"
    secondary_provider: str = "gemini"
    secondary_model: str = "text-embedding-004"
    timeout: float = 30.0
    rate_limit_backoff: float = 2.0
    batch_delay: float = 0.1


class LLMSettings(BaseModel):
    provider: str = "openai"
    model: str = "gpt-4o-mini"
    temperature: float = 0.3
    max_tokens: int = 1000


class ChunkingSettings(BaseModel):
    max_chars: int = 1000
    overlap_chars: int = 100

    @model_validator(mode="after")
    def _check_overlap(self) -> ChunkingSettings:
        if self.max_chars <= 0 or not 0 <= self.overlap_chars < self.max_chars:
            raise ValueError("chunking requires 0 <= overlap_chars < max_chars")
        return self


class RetrievalSettings(BaseModel):
    threshold: float = 0.3
    top_k: int = 10


class IngestionSettings(BaseModel):
    max_workers: int = 4
    requests_per_second: float = 10.0
    job_ttl_seconds: float = 3600.0


class ValidationSettings(BaseModel):
    syntax_timeout: float = 10.0
    pass_threshold: int = 70
    weights: dict[str, float] = Field(
        default_factory=lambda: {"syntax": 0.25, "grounding": 0.25, "quality": 0.50}
    )


class GroundingSettings(BaseModel):
    max_claims: int = 10


# ---------------------------------------------------------------------------
# Root settings
# ---------------------------------------------------------------------------


class Settings(BaseModel):
    embedding: EmbeddingSettings = Field(default_factory=EmbeddingSettings)
    llm: LLMSettings = Field(default_factory=LLMSettings)
    chunking: ChunkingSettings = Field(default_factory=ChunkingSettings)
    retrieval: RetrievalSettings = Field(default_factory=RetrievalSettings)
    ingestion: IngestionSettings = Field(default_factory=IngestionSettings)
    validation: ValidationSettings = Field(default_factory=ValidationSettings)
    grounding: GroundingSettings = Field(default_factory=GroundingSettings)
    log_level: str = "INFO"


def _find_settings_file() -> Path | None:
    """Walk up from cwd looking for settings.yaml."""
    profile = os.getenv("EDURAG_PROFILE", "")
    names = [f"settings-{profile}.yaml", "settings.yaml"] if profile else ["settings.yaml"]

    cwd = Path.cwd()
    for parent in [cwd, *cwd.parents]:
        for name in names:
            candidate = parent / name
            if candidate.exists():
                return candidate
    return None


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from YAML file, falling back to defaults.

    ``EDURAG_LOG_LEVEL`` overrides ``log_level`` from the file.
    """
    settings_path = Path(path) if path is not None else _find_settings_file()

    raw: dict = {}
    if settings_path is not None:
        with open(settings_path, encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}

    env_level = os.getenv("EDURAG_LOG_LEVEL")
    if env_level:
        raw["log_level"] = env_level

    return Settings(**raw)

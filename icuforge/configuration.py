"""Environment-backed configuration loader for icuforge."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Sequence

from dotenv import dotenv_values
from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

from .errors import ConfigurationError
from .structures import ReconstructOptions

APP_NAME = "icuforge"


class IcuforgeConfig(BaseModel):
    """Schema describing all supported configuration options."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    ICUFORGE_TARGET_LANGUAGE: str = Field(
        default="en",
        description="Language tag used for plural category validation.",
    )
    ICUFORGE_VALIDATE_CATEGORIES: bool = Field(
        default=True,
        description="Add plural categories the target language requires.",
    )
    ICUFORGE_PRESERVE_EXACT_MATCHES: bool = Field(
        default=True,
        description="Carry =N variants over when a translation omits them.",
    )
    ICUFORGE_DEBUG: bool = Field(default=False)

    @model_validator(mode="before")
    @classmethod
    def _normalise_language(cls, data: Any) -> Any:
        if isinstance(data, dict):
            raw_value = data.get("ICUFORGE_TARGET_LANGUAGE")
            if isinstance(raw_value, str):
                normalized = raw_value.strip().replace("_", "-")
                if not normalized:
                    raise ValueError("ICUFORGE_TARGET_LANGUAGE must not be empty.")
                data["ICUFORGE_TARGET_LANGUAGE"] = normalized
        return data

    def reconstruct_options(self) -> ReconstructOptions:
        return ReconstructOptions(
            target_language=self.ICUFORGE_TARGET_LANGUAGE,
            validate_categories=self.ICUFORGE_VALIDATE_CATEGORIES,
            preserve_exact_matches=self.ICUFORGE_PRESERVE_EXACT_MATCHES,
        )


@lru_cache(maxsize=1)
def _load_settings(app_dir: Path | None = None) -> IcuforgeConfig:
    """Load configuration layers once and cache the immutable model."""

    base_dir = app_dir or Path.cwd()
    combined: Dict[str, str] = {}
    sources: Dict[str, str] = {}
    _merge_env_sources(
        combined,
        sources=sources,
        app_dir=base_dir,
        schema=IcuforgeConfig,
    )

    try:
        return IcuforgeConfig.model_validate(combined)
    except ValidationError as exc:
        raise ConfigurationError(
            _format_validation_errors(exc.errors(), sources)
        ) from exc


def _merge_env_sources(
    target: Dict[str, str],
    *,
    sources: Dict[str, str],
    app_dir: Path,
    schema: type[BaseModel],
) -> None:
    """Merge .env and process environment variables into the target mapping."""

    allowed = set(schema.model_fields.keys())

    def merge_values(values: Mapping[str, str], *, source_prefix: str) -> None:
        for key, value in sorted(values.items()):
            if value is None:
                continue
            if key not in allowed:
                continue
            target[key] = value
            sources[key] = f"env:{source_prefix}:{key}"

    dotenv_path = app_dir / ".env"
    if dotenv_path.exists():
        try:
            dotenv_content = dotenv_values(dotenv_path)
        except OSError as exc:
            raise ConfigurationError(
                f"Configuration file {dotenv_path} could not be read: {exc}"
            ) from exc
        merge_values(
            {k: v for k, v in dotenv_content.items() if v is not None},
            source_prefix=".env",
        )

    merge_values(
        {k: v for k, v in os.environ.items() if isinstance(v, str)},
        source_prefix="process",
    )


def _format_validation_errors(
    entries: Sequence[Mapping[str, Any]],
    sources: Mapping[str, str],
) -> str:
    details: list[str] = []
    for entry in entries:
        path = entry.get("loc") or []
        if isinstance(path, (list, tuple)):
            location = ".".join(str(part) for part in path if part not in {None, ""})
        else:
            location = str(path)
        message = str(entry.get("msg") or "Invalid value")
        source = sources.get(location)
        origin = f" (source: {source})" if source else ""
        prefix = f"{location}: " if location else ""
        details.append(f"- {prefix}{message}{origin}")
    return "Configuration validation errors detected:\n" + "\n".join(details)


def get_settings(app_dir: Path | None = None) -> IcuforgeConfig:
    """Return the validated settings model for typed access."""

    return _load_settings(app_dir=app_dir)


def clear_settings_cache() -> None:
    _load_settings.cache_clear()

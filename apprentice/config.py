"""
Typed configuration model with precedence-based loader.

Precedence (lowest to highest):
    defaults < config file context (YAML) < env vars < CLI flags

The config file holds several named *contexts*; ``default_context`` (or the
``context`` argument) selects which one is applied.
"""

from __future__ import annotations

import math
import os
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from rich.errors import StyleSyntaxError
from rich.style import Style

from apprentice.errors import ConfigError
from apprentice.llm.types import ModelProvider


class Goal(str, Enum):
    """Cloud platform whose CLI the agent drives."""

    GCP = "gcp"
    AWS = "aws"
    AZURE = "azure"


# ---------------------------------------------------------------------------
# Section dataclasses
# ---------------------------------------------------------------------------

@dataclass
class ModelConfig:
    """
    Model endpoint, credentials and sampling parameters.

    Sampling fields left as ``None`` are absent and never sent to the vendor.
    """

    provider: ModelProvider
    name: str
    api_key: str
    api_url: str
    api_version: str | None = None
    max_tokens: int | None = None
    n: int | None = None
    temperature: float | None = None
    top_p: float | None = None
    top_k: int | None = None
    frequency_penalty: float | None = None
    presence_penalty: float | None = None
    stop_sequence: str | None = None


@dataclass
class Settings:
    user_style: str = "bold white on dark_red"
    apprentice_style: str = "green"
    tool_style: str = "yellow"


@dataclass
class AppConfig:
    goal: Goal
    model: ModelConfig
    message: str | None = None
    prompt: str | None = None
    settings: Settings = field(default_factory=Settings)

    def to_dict(self) -> dict:
        d = asdict(self)
        d["goal"] = self.goal.value
        d["model"]["provider"] = self.model.provider.value
        key = self.model.api_key
        d["model"]["api_key"] = f"{key[:4]}..." if key else ""
        return d


# ---------------------------------------------------------------------------
# Option tables
# ---------------------------------------------------------------------------

_STR_OPTIONS = (
    "goal", "model_provider", "model", "api_key", "api_url", "api_version",
    "stop_sequence", "message", "prompt",
)
_INT_OPTIONS = ("max_tokens", "n", "top_k")
_FLOAT_OPTIONS = ("temperature", "top_p", "frequency_penalty", "presence_penalty")
_STYLE_OPTIONS = ("user_style", "apprentice_style", "tool_style")

_ENV_MAP: dict[str, tuple[str, type]] = {
    "APPRENTICE_GOAL":              ("goal", str),
    "APPRENTICE_MODEL_PROVIDER":    ("model_provider", str),
    "APPRENTICE_MODEL":             ("model", str),
    "APPRENTICE_API_KEY":           ("api_key", str),
    "APPRENTICE_API_URL":           ("api_url", str),
    "APPRENTICE_API_VERSION":       ("api_version", str),
    "APPRENTICE_MAX_TOKENS":        ("max_tokens", int),
    "APPRENTICE_N":                 ("n", int),
    "APPRENTICE_TEMPERATURE":       ("temperature", float),
    "APPRENTICE_TOP_P":             ("top_p", float),
    "APPRENTICE_TOP_K":             ("top_k", int),
    "APPRENTICE_FREQUENCY_PENALTY": ("frequency_penalty", float),
    "APPRENTICE_PRESENCE_PENALTY":  ("presence_penalty", float),
    "APPRENTICE_STOP_SEQUENCE":     ("stop_sequence", str),
    "APPRENTICE_MESSAGE":           ("message", str),
    "APPRENTICE_PROMPT":            ("prompt", str),
}


def default_api_url(provider: ModelProvider, model: str) -> str:
    if provider is ModelProvider.OPENAI:
        return "https://api.openai.com/v1/chat/completions"
    if provider is ModelProvider.ANTHROPIC:
        return "https://api.anthropic.com/v1/messages"
    return f"https://generativelanguage.googleapis.com/v1beta/models/{model}:generateContent"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _coerce(name: str, value: str, target_type: type) -> Any:
    """Coerce a string env value to the target type."""
    try:
        return target_type(value)
    except ValueError as exc:
        raise ConfigError(f"{name} must be {target_type.__name__}, got {value!r}") from exc


def _check_option(name: str, value: Any) -> Any:
    """Type-check a single option value coming from the file or CLI."""
    if value is None:
        return None
    if name in _INT_OPTIONS:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{name} must be an integer value")
        return value
    if name in _FLOAT_OPTIONS:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ConfigError(f"{name} must be a float value")
        if not math.isfinite(value):
            raise ConfigError(f"{name} must be a finite number")
        return float(value)
    if name in _STR_OPTIONS or name in _STYLE_OPTIONS:
        if not isinstance(value, str):
            raise ConfigError(f"{name} must be a string value")
        return value
    raise ConfigError(f"unknown option: {name}")


def _read_context(path: Path, context: str | None) -> dict[str, Any]:
    """Return the flat option dict of the selected context of a config file."""
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse config file: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError("Failed to parse config file: top level must be a mapping")

    raw: dict[str, Any] = {}

    settings = data.get("settings") or {}
    if not isinstance(settings, dict):
        raise ConfigError("settings must be a mapping")
    for key in _STYLE_OPTIONS:
        if key in settings:
            raw[key] = _check_option(key, settings[key])

    name = context or data.get("default_context")
    if name is None:
        return raw
    if not isinstance(name, str):
        raise ConfigError("default_context must be a string value")
    section = data.get(name)
    if not isinstance(section, dict):
        raise ConfigError(f"configuration for the context {name!r} is not specified")
    for key, value in section.items():
        raw[key] = _check_option(key, value)
    return raw


def find_config_path() -> Path | None:
    """Find the config file in standard locations."""
    env_path = os.environ.get("APPRENTICE_CONFIG")
    if env_path:
        return Path(env_path).expanduser()
    candidates = [
        Path.home() / ".config" / "apprentice" / "config.yaml",
        Path.home() / ".apprentice" / "config.yaml",
    ]
    for p in candidates:
        if p.is_file():
            return p
    return None


def _require(raw: dict[str, Any], name: str) -> str:
    value = raw.get(name)
    if not value:
        raise ConfigError(f"{name} is not specified (use --{name.replace('_', '-')})")
    return value


def build_config(raw: dict[str, Any]) -> AppConfig:
    """Validate the merged option dict and build an ``AppConfig``."""
    goal_name = _require(raw, "goal")
    try:
        goal = Goal(goal_name)
    except ValueError:
        raise ConfigError(f"unknown goal: {goal_name} (expected gcp, aws or azure)") from None

    provider_name = _require(raw, "model_provider")
    try:
        provider = ModelProvider(provider_name)
    except ValueError:
        raise ConfigError(
            f"unknown provider: {provider_name} (expected openai, anthropic or gcp)"
        ) from None

    model_name = _require(raw, "model")
    model = ModelConfig(
        provider=provider,
        name=model_name,
        api_key=_require(raw, "api_key"),
        api_url=raw.get("api_url") or default_api_url(provider, model_name),
        api_version=raw.get("api_version"),
        max_tokens=raw.get("max_tokens"),
        n=raw.get("n"),
        temperature=raw.get("temperature"),
        top_p=raw.get("top_p"),
        top_k=raw.get("top_k"),
        frequency_penalty=raw.get("frequency_penalty"),
        presence_penalty=raw.get("presence_penalty"),
        stop_sequence=raw.get("stop_sequence"),
    )

    settings = Settings()
    for key in _STYLE_OPTIONS:
        if raw.get(key):
            try:
                Style.parse(raw[key])
            except StyleSyntaxError as exc:
                raise ConfigError(f"{key} is not a valid style: {exc}") from exc
            setattr(settings, key, raw[key])

    return AppConfig(
        goal=goal,
        model=model,
        message=raw.get("message"),
        prompt=raw.get("prompt"),
        settings=settings,
    )


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def load_config(
    config_path: str | Path | None = None,
    *,
    context: str | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Build an AppConfig by layering sources in precedence order:

        defaults  <  config file  <  env vars  <  CLI flags

    Parameters
    ----------
    config_path : path to the YAML config file (optional)
    context : name of the context to apply instead of ``default_context``
    cli_overrides : dict of option name -> value; ``None`` values are ignored
    """
    raw: dict[str, Any] = {}

    # --- 1. Config file ---
    if config_path is not None:
        p = Path(config_path).expanduser()
        if p.is_file():
            raw.update(_read_context(p, context))
        elif context:
            raise ConfigError(f"config file not found: {p}")

    # --- 2. Env var overrides ---
    for env_var, (name, target_type) in _ENV_MAP.items():
        val = os.environ.get(env_var)
        if val is not None:
            raw[name] = _coerce(name, val, target_type)

    # --- 3. CLI flag overrides ---
    if cli_overrides:
        for name, value in cli_overrides.items():
            if value is not None:
                raw[name] = _check_option(name, value)

    return build_config(raw)

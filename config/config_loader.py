"""Load settings.yaml into typed dataclasses. Resolves fallback mode at startup."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

logger = logging.getLogger(__name__)

_SETTINGS_PATH = Path(__file__).parent / "settings.yaml"


@dataclass
class ModelConfig:
    name: str
    sdk: str
    model: str
    api_key_env: str
    timeout_sec: int
    max_tokens: int
    base_url: str | None = None


@dataclass
class PipelineConfig:
    enable_code_quality: bool = True
    enable_security: bool = True
    enable_performance: bool = True
    enable_style: bool = True
    max_retries: int = 3
    timeout_ms: int = 30000
    base_delay_ms: int = 1000
    fallback_mode: bool = False


@dataclass
class DebateConfig:
    max_points: int = 3
    max_follow_ups: int = 2
    expiry_days: int = 7
    temperature: float = 0.7
    max_tokens: int = 500


@dataclass
class PromptsConfig:
    code_quality: str
    security: str
    performance: str
    style: str
    debate_base: str
    debate_for: str
    debate_against: str
    debate_continue: str
    debate_follow_up: str
    debate_counter: str


@dataclass
class DefaultsConfig:
    provider: str
    output_dir: Path


@dataclass
class AppConfig:
    defaults: DefaultsConfig
    models: dict[str, ModelConfig]
    prompts: PromptsConfig
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    debate: DebateConfig = field(default_factory=DebateConfig)
    available_providers: set[str] = field(default_factory=set)

    @property
    def fallback_mode(self) -> bool:
        return self.pipeline.fallback_mode


def load_config(settings_path: Path = _SETTINGS_PATH) -> AppConfig:
    """Load and validate configuration from settings.yaml.

    Raises FileNotFoundError if settings file missing.
    A missing API key for the selected provider does not raise; it switches
    the pipeline into fallback mode instead.
    """
    if not settings_path.exists():
        raise FileNotFoundError(f"Settings file not found: {settings_path}")

    with settings_path.open("r", encoding="utf-8") as f:
        raw = yaml.safe_load(f)

    defaults_raw = raw["defaults"]
    defaults = DefaultsConfig(
        provider=str(defaults_raw["provider"]),
        output_dir=Path(defaults_raw["output_dir"]),
    )

    pipeline_raw = raw.get("pipeline") or {}
    pipeline = PipelineConfig(
        enable_code_quality=bool(pipeline_raw.get("enable_code_quality", True)),
        enable_security=bool(pipeline_raw.get("enable_security", True)),
        enable_performance=bool(pipeline_raw.get("enable_performance", True)),
        enable_style=bool(pipeline_raw.get("enable_style", True)),
        max_retries=int(pipeline_raw.get("max_retries", 3)),
        timeout_ms=int(pipeline_raw.get("timeout_ms", 30000)),
        base_delay_ms=int(pipeline_raw.get("base_delay_ms", 1000)),
    )

    debate_raw = raw.get("debate") or {}
    debate = DebateConfig(
        max_points=int(debate_raw.get("max_points", 3)),
        max_follow_ups=int(debate_raw.get("max_follow_ups", 2)),
        expiry_days=int(debate_raw.get("expiry_days", 7)),
        temperature=float(debate_raw.get("temperature", 0.7)),
        max_tokens=int(debate_raw.get("max_tokens", 500)),
    )

    prompts_raw = raw["prompts"]
    prompts = PromptsConfig(
        code_quality=prompts_raw["code_quality"],
        security=prompts_raw["security"],
        performance=prompts_raw["performance"],
        style=prompts_raw["style"],
        debate_base=prompts_raw["debate_base"],
        debate_for=prompts_raw["debate_for"],
        debate_against=prompts_raw["debate_against"],
        debate_continue=prompts_raw["debate_continue"],
        debate_follow_up=prompts_raw["debate_follow_up"],
        debate_counter=prompts_raw["debate_counter"],
    )

    models: dict[str, ModelConfig] = {}
    available_providers: set[str] = set()

    for provider_name, model_raw in raw["models"].items():
        model_cfg = ModelConfig(
            name=provider_name,
            sdk=model_raw["sdk"],
            model=model_raw["model"],
            api_key_env=model_raw["api_key_env"],
            timeout_sec=int(model_raw["timeout_sec"]),
            max_tokens=int(model_raw["max_tokens"]),
            base_url=model_raw.get("base_url"),
        )
        models[provider_name] = model_cfg

        api_key = os.environ.get(model_raw["api_key_env"], "").strip()
        if api_key:
            available_providers.add(provider_name)
            logger.info("Provider available: %s", provider_name)
        else:
            logger.info(
                "Provider skipped (no API key): %s, set %s in .env",
                provider_name,
                model_raw["api_key_env"],
            )

    pipeline.fallback_mode = defaults.provider not in available_providers
    if pipeline.fallback_mode:
        logger.warning(
            "Provider '%s' is not configured, AI features will run in fallback mode",
            defaults.provider,
        )

    return AppConfig(
        defaults=defaults,
        models=models,
        prompts=prompts,
        pipeline=pipeline,
        debate=debate,
        available_providers=available_providers,
    )

"""
Configuration loading and validation for rivalscope.

Loads rivalscope.toml files and validates settings using Pydantic. API keys
never live in the file; each section names the environment variable that
holds its key.
"""

import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from .capabilities.base import DEFAULT_RESEARCH_CAPABILITIES
from .reasoning.openai_compat import DEFAULT_BASE_URL, DEFAULT_MODEL


def _env_key(env_name: str, purpose: str) -> str:
    value = os.environ.get(env_name)
    if not value:
        raise ValueError(f"API key not found in environment: {env_name} (required for {purpose})")
    return value


class MissionConfig(BaseModel):
    """Research loop settings."""

    default_duration_minutes: float = Field(default=45.0, gt=0)
    pause_seconds: float = Field(default=2.0, ge=0.0)
    call_timeout_seconds: float = Field(default=600.0, gt=0)
    research_capabilities: list[str] = Field(
        default_factory=lambda: list(DEFAULT_RESEARCH_CAPABILITIES)
    )

    @field_validator("research_capabilities")
    @classmethod
    def validate_three_distinct(cls, v: list[str]) -> list[str]:
        """A research cycle chains three distinct capabilities."""
        if len(set(v)) < 3:
            raise ValueError("At least 3 distinct research capabilities are required")
        return v


class GatewayConfig(BaseModel):
    """Tool gateway (MCP over streamable HTTP)."""

    url: str = "http://localhost:8080/mcp"
    token_env: str | None = "GATEWAY_TOKEN"
    memory_prefix: str = "memory-"

    def get_token(self) -> str | None:
        return os.environ.get(self.token_env) if self.token_env else None


class SearchConfig(BaseModel):
    """Optional Tavily backend for web search."""

    tavily_enabled: bool = False
    tavily_api_key_env: str = "TAVILY_API_KEY"
    max_results: int = 10


class ReasoningConfig(BaseModel):
    """Reasoning-dialogue service (OpenAI-compatible chat completions)."""

    model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    api_key_env: str = "GROQ_API_KEY"
    timeout_seconds: float = 300.0
    max_steps: int = Field(default=8, ge=1)


class SocialConfig(BaseModel):
    """Social-signal search through xAI."""

    enabled: bool = True
    model: str = "grok-4-fast"
    api_key_env: str = "XAI_API_KEY"
    timeout_seconds: float = 120.0


class DeliveryConfig(BaseModel):
    """Report delivery through Resend."""

    enabled: bool = True
    api_key_env: str = "RESEND_API_KEY"
    sender: str = "onboarding@resend.dev"
    subject_prefix: str = "[RivalScope]"


class StorageConfig(BaseModel):
    """Storage configuration."""

    jobs_db_path: Path = Path(".rivalscope/jobs.db")


class SchedulerConfig(BaseModel):
    """Recurring-mission sweep."""

    sweep_interval_seconds: float = Field(default=60.0, gt=0)
    mission_duration_minutes: float = Field(default=45.0, gt=0)


class AppConfig(BaseModel):
    """Complete rivalscope configuration."""

    mission: MissionConfig = Field(default_factory=MissionConfig)
    gateway: GatewayConfig = Field(default_factory=GatewayConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    reasoning: ReasoningConfig = Field(default_factory=ReasoningConfig)
    social: SocialConfig = Field(default_factory=SocialConfig)
    delivery: DeliveryConfig = Field(default_factory=DeliveryConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    scheduler: SchedulerConfig = Field(default_factory=SchedulerConfig)

    def get_reasoning_api_key(self) -> str:
        """
        Raises:
            ValueError: If the key is missing from the environment
        """
        return _env_key(self.reasoning.api_key_env, f"reasoning model {self.reasoning.model}")

    def get_social_api_key(self) -> str:
        return _env_key(self.social.api_key_env, f"social search {self.social.model}")

    def get_tavily_api_key(self) -> str:
        return _env_key(self.search.tavily_api_key_env, "Tavily search")

    def get_delivery_api_key(self) -> str:
        return _env_key(self.delivery.api_key_env, "report delivery")


def load_config(config_path: Path) -> AppConfig:
    """
    Load configuration from a TOML file.

    Args:
        config_path: Path to rivalscope.toml

    Returns:
        Validated AppConfig

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If config is invalid
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "rb") as f:
        config_data = tomllib.load(f)

    try:
        return AppConfig(**config_data)
    except Exception as e:
        raise ValueError(f"Invalid configuration: {e}") from e


def load_config_or_default(config_path: Path) -> AppConfig:
    """Like load_config, but an absent file yields the defaults."""
    if not config_path.exists():
        return AppConfig()
    return load_config(config_path)


def create_default_config(output_path: Path, gateway_url: str = "http://localhost:8080/mcp") -> None:
    """
    Write a rivalscope.toml with every section at its default.

    Args:
        output_path: Where to write rivalscope.toml
        gateway_url: Tool gateway endpoint
    """
    template = f'''[mission]
default_duration_minutes = 45
pause_seconds = 2.0  # Courtesy delay between research iterations
call_timeout_seconds = 600
research_capabilities = ["exa", "perplexity", "xai"]

[gateway]
url = "{gateway_url}"
token_env = "GATEWAY_TOKEN"
memory_prefix = "memory-"

[search]
tavily_enabled = false  # Serve "exa" from Tavily instead of the gateway
tavily_api_key_env = "TAVILY_API_KEY"

[reasoning]
model = "{DEFAULT_MODEL}"
base_url = "{DEFAULT_BASE_URL}"
api_key_env = "GROQ_API_KEY"
max_steps = 8

[social]
enabled = true
model = "grok-4-fast"
api_key_env = "XAI_API_KEY"

[delivery]
enabled = true
api_key_env = "RESEND_API_KEY"
sender = "onboarding@resend.dev"

[storage]
jobs_db_path = ".rivalscope/jobs.db"

[scheduler]
sweep_interval_seconds = 60
mission_duration_minutes = 45
'''

    output_path.write_text(template, encoding="utf-8")

"""
Configuration models for a2a-planner.

Defines dataclasses for the unified YAML configuration file. Defaults
for connection settings are read from the environment when a config
object is created, so a bare ``AppConfig()`` already honours ``.env``.
"""

import os
from dataclasses import dataclass, field


def _env(name: str, default: str) -> str:
    return os.getenv(name, default)


@dataclass
class A2AConfig:
    """Connection settings for the counterpart A2A agent."""
    base_url: str = field(
        default_factory=lambda: _env("A2A_BASE_URL", "http://localhost:3000")
    )
    endpoint_path: str = "/a2a"
    timeout: float = 60.0
    card_timeout: float = 10.0


@dataclass
class InferenceConfig:
    """Configuration for the OpenAI-compatible planning model."""
    base_url: str = field(
        default_factory=lambda: _env("INFERENCE_BASE_URL", "https://api.openai.com/v1")
    )
    model: str = field(default_factory=lambda: _env("INFERENCE_MODEL", "gpt-4o"))
    api_key: str = field(default_factory=lambda: _env("OPENAI_API_KEY", ""))
    temperature: float = 0.2
    max_tokens: int = 4096
    timeout: float = 120.0


@dataclass
class OrchestrationConfig:
    """Limits and naming for the orchestration loop."""
    max_turns: int = 25
    max_tool_calls_per_turn: int = 10
    agent_name: str = "Planner"


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "INFO"


@dataclass
class AppConfig:
    """
    Unified application configuration container.

    Holds all configuration sections loaded from config/config.yaml.
    """
    version: str = "1.0"
    a2a: A2AConfig = field(default_factory=A2AConfig)
    inference: InferenceConfig = field(default_factory=InferenceConfig)
    orchestration: OrchestrationConfig = field(default_factory=OrchestrationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    operations: list[dict] = field(default_factory=list)

    @property
    def log_level(self) -> str:
        return self.logging.level

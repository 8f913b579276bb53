"""Configuration management for the MoodFi relay."""

import os
from pathlib import Path
from typing import List, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field


# Load environment variables
load_dotenv()


class ServerConfig(BaseModel):
    """HTTP server configuration."""
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=3001)
    ssl_keyfile: Optional[str] = Field(default=None)
    ssl_certfile: Optional[str] = Field(default=None)
    allowed_origins: List[str] = Field(default_factory=lambda: [
        "https://localhost:5173",
        "https://localhost:5174",
        "http://localhost:5173",
        "http://localhost:5174",
    ])


class LLMConfig(BaseModel):
    """Chat completion provider configuration."""
    provider: str = Field(default="openai")
    model: str = Field(default="gpt-3.5-turbo")
    temperature: float = Field(default=0.7)
    max_tokens: int = Field(default=500)
    timeout_seconds: float = Field(default=30.0)
    api_key: Optional[str] = Field(default=None)
    base_url: Optional[str] = Field(default=None)
    fallback_reply: str = Field(default="No response.")


class EmotionConfig(BaseModel):
    """Emotion payload handling."""
    marker: str = Field(default="Current user emotions detected")
    window_seconds: int = Field(default=3)


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = Field(default="INFO")
    format: str = Field(default="text")
    output_file: Optional[str] = Field(default=None)


class Config(BaseModel):
    """Main configuration class."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    llm: LLMConfig = Field(default_factory=LLMConfig)
    emotion: EmotionConfig = Field(default_factory=EmotionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: str = None) -> Config:
    """Load configuration from YAML file and environment variables.

    Args:
        config_path: Path to config YAML file. If None, uses MOODFI_CONFIG
            or the bundled default.

    Returns:
        Config object with loaded settings.
    """
    if config_path is None:
        config_path = os.getenv("MOODFI_CONFIG") or Path(__file__).parent / "config.yaml"

    with open(config_path, "r") as f:
        config_dict = yaml.safe_load(f) or {}

    for section in ("server", "llm", "emotion", "logging"):
        config_dict.setdefault(section, {})

    # Override with environment variables where applicable
    if os.getenv("HOST"):
        config_dict["server"]["host"] = os.getenv("HOST")

    if os.getenv("PORT"):
        config_dict["server"]["port"] = int(os.getenv("PORT"))

    if os.getenv("SSL_KEYFILE"):
        config_dict["server"]["ssl_keyfile"] = os.getenv("SSL_KEYFILE")

    if os.getenv("SSL_CERTFILE"):
        config_dict["server"]["ssl_certfile"] = os.getenv("SSL_CERTFILE")

    if os.getenv("LLM_PROVIDER"):
        config_dict["llm"]["provider"] = os.getenv("LLM_PROVIDER")

    if os.getenv("LLM_MODEL"):
        config_dict["llm"]["model"] = os.getenv("LLM_MODEL")

    if os.getenv("LOG_LEVEL"):
        config_dict["logging"]["level"] = os.getenv("LOG_LEVEL")

    if not config_dict["llm"].get("api_key"):
        provider = config_dict["llm"].get("provider", "openai")
        key_var = "GEMINI_API_KEY" if provider == "gemini" else "OPENAI_API_KEY"
        config_dict["llm"]["api_key"] = os.getenv(key_var)

    return Config(**config_dict)


# Global config instance
_config: Config = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        Config object.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config(config_path: str = None) -> Config:
    """Reload configuration from file.

    Args:
        config_path: Path to config YAML file.
    """
    global _config
    _config = load_config(config_path)
    return _config

"""
Runtime settings, read from the environment.

`.env` at the project root is loaded first (without overriding variables
already set in the process environment).
"""
import os
from dataclasses import dataclass, field
from typing import Optional

from dotenv import load_dotenv

DASHSCOPE_BASE_URL = "https://dashscope.aliyuncs.com/compatible-mode/v1"


def _env_float(key: str, default: float) -> float:
    raw = os.getenv(key)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


@dataclass
class Settings:
    api_key: Optional[str] = field(default_factory=lambda: os.getenv("DASHSCOPE_API_KEY") or None)
    base_url: str = field(default_factory=lambda: os.getenv("DASHSCOPE_BASE_URL", DASHSCOPE_BASE_URL))
    default_model: Optional[str] = field(default_factory=lambda: os.getenv("AI_MODEL") or None)
    vision_adapter: str = field(default_factory=lambda: os.getenv("VISION_ADAPTER", "dashscope").lower())
    timeout_s: float = field(default_factory=lambda: _env_float("VISION_TIMEOUT_S", 30.0))
    host: str = field(default_factory=lambda: os.getenv("HOST", "127.0.0.1"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8000")))

    def __post_init__(self):
        self.base_url = self.base_url.rstrip("/")

    @property
    def has_credential(self) -> bool:
        return bool(self.api_key)


def load_settings(dotenv_path: str | None = ".env") -> Settings:
    if dotenv_path:
        load_dotenv(dotenv_path=dotenv_path, override=False)
    return Settings()

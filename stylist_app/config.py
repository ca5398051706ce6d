"""Configuration helpers for the wardrobe stylist service."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Optional

DEFAULT_VISION_MODEL = "gemini-2.0-flash"


@dataclass
class AppConfig:
    """Runtime settings for the stylist service.

    Values come from an optional ``key: value`` file selected by ``APP_ENV`` or
    ``APP_CONFIG_PATH``; environment variables with the upper-cased key win so
    secrets never have to live in the file.
    """

    gemini_api_key: Optional[str] = None
    vision_model: str = DEFAULT_VISION_MODEL
    vision_timeout_seconds: float = 15.0
    wardrobe_db_path: str = "data/wardrobe.db"
    session_store_backend: str = "memory"
    session_store_path: Optional[str] = None
    max_history_resets: int = 1
    environment: str | None = None

    @classmethod
    def from_env(cls) -> "AppConfig":
        env_name = os.getenv("APP_ENV")
        config_path = os.getenv("APP_CONFIG_PATH")
        config_dir = Path(os.getenv("APP_CONFIG_DIR", "config/environments"))
        file_config: dict = {}

        if config_path:
            path = Path(config_path)
        elif env_name:
            path = config_dir / f"{env_name}.yaml"
        else:
            path = None

        if path and path.exists():
            file_config = cls._load_config_file(path)

        def get_value(key: str, default: Optional[str] = None) -> Optional[str]:
            return os.getenv(key.upper(), file_config.get(key, default))

        return cls(
            gemini_api_key=get_value("gemini_api_key") or None,
            vision_model=str(get_value("vision_model", DEFAULT_VISION_MODEL) or DEFAULT_VISION_MODEL),
            vision_timeout_seconds=float(get_value("vision_timeout_seconds", "15") or 15),
            wardrobe_db_path=str(get_value("wardrobe_db_path", "data/wardrobe.db")),
            session_store_backend=str(get_value("session_store_backend", "memory")).lower(),
            session_store_path=get_value("session_store_path"),
            max_history_resets=int(get_value("max_history_resets", "1") or 1),
            environment=env_name,
        )

    @staticmethod
    def _load_config_file(path: Path) -> dict:
        """Parse flat ``key: value`` lines, ignoring comments and blanks."""

        config: dict[str, str] = {}
        for line in path.read_text().splitlines():
            stripped = line.strip()
            if not stripped or stripped.startswith("#") or ":" not in stripped:
                continue
            key, raw_value = stripped.split(":", 1)
            value = raw_value.strip()
            if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
                value = value[1:-1]
            config[key.strip()] = value
        return config


__all__ = ["AppConfig", "DEFAULT_VISION_MODEL"]

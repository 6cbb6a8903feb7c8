"""Runtime settings, read from the environment (``YARD_*``) or a ``.env`` file."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Repo root when installed in editable mode.
_PROJECT_ROOT = Path(__file__).resolve().parents[2]


class Settings(BaseSettings):
    data_dir: Path = _PROJECT_ROOT / "data"
    store_file: str = "yard.json"
    log_level: str = "WARNING"
    # Seconds to wait for another process holding the store; negative waits forever.
    lock_timeout: float = 30.0

    model_config = SettingsConfigDict(
        env_prefix="YARD_",
        env_file=".env",
        env_file_encoding="utf-8",
    )

    @property
    def store_path(self) -> Path:
        return self.data_dir / self.store_file


settings = Settings()

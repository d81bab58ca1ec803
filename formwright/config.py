from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class FormSettings(BaseSettings):
    """Rendering defaults, overridable with FORMWRIGHT_* environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FORMWRIGHT_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    submit_label: str = "Submit"
    label_suffix: str = ":"


@lru_cache
def get_settings() -> FormSettings:
    return FormSettings()

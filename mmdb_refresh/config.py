from datetime import timedelta
from typing import Annotated, Any

from pydantic import AliasChoices, Field, HttpUrl, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_UPDATE_INTERVAL = timedelta(hours=4)
DEFAULT_UPDATE_REPEAT_INTERVAL = timedelta(minutes=5)
DEFAULT_TIMEOUT = 60.0


def _key(dotted: str) -> AliasChoices:
    # Deployments use the dotted keys; environment variables use underscores.
    return AliasChoices(dotted, dotted.replace(".", "_"))


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # remote
    remote_url: Annotated[
        str | None, Field(default=None, validation_alias=_key("maxmind.db.remote.url")), "remote"
    ]
    license_key: Annotated[str, Field(default="", validation_alias=_key("maxmind.license.key")), "remote"]
    user_agent: Annotated[
        str | None, Field(default=None, validation_alias=_key("maxmind.db.remote.useragent")), "remote"
    ]
    timeout: Annotated[
        float, Field(default=DEFAULT_TIMEOUT, validation_alias=_key("maxmind.db.remote.timeout")), "remote"
    ]
    update_interval: Annotated[
        timedelta,
        Field(default=DEFAULT_UPDATE_INTERVAL, validation_alias=_key("maxmind.db.update.interval")),
        "remote",
    ]
    update_repeat_interval: Annotated[
        timedelta,
        Field(default=DEFAULT_UPDATE_REPEAT_INTERVAL, validation_alias=_key("maxmind.db.update.repeat.interval")),
        "remote",
    ]

    # local
    local_path: Annotated[str | None, Field(default=None, validation_alias=_key("maxmind.db.local.path")), "local"]

    # storage
    dest_dir: Annotated[str | None, Field(default=None, validation_alias=_key("maxmind.db.dest.dir")), "storage"]

    # logging
    log_level: Annotated[str, Field(default="INFO", validation_alias=_key("log.level")), "logging"]
    debug: Annotated[bool, Field(default=False), "logging"]

    # monitoring
    sentry_dsn: Annotated[HttpUrl | None, Field(default=None), "monitoring"]

    @field_validator("update_interval", "update_repeat_interval", mode="before")
    @classmethod
    def validate_interval(cls, v: Any) -> Any:
        # Bare numbers are milliseconds, as in existing deployments.
        if isinstance(v, int) and not isinstance(v, bool):
            return timedelta(milliseconds=v)
        if isinstance(v, str) and v.strip().isdigit():
            return timedelta(milliseconds=int(v.strip()))
        return v

    @field_validator("remote_url", "local_path", "user_agent", mode="after")
    @classmethod
    def validate_optional_str(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v


def get_settings() -> Settings:
    """Resolve settings from the environment.

    Not cached: every trigger invocation reads the current configuration.
    """
    return Settings()  # pyright: ignore[reportCallIssue]

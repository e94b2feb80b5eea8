"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (DRIVEPLANE__SECTION__KEY)
3. YAML config file (--config or ~/.config/driveplane/config.yaml)
4. Built-in defaults (this file)

Environment Variable Format:
    DRIVEPLANE__<SECTION>__<KEY>=<VALUE>

Examples:
    DRIVEPLANE__LOGGING__LEVEL=DEBUG
    DRIVEPLANE__SERVER__PORT=8080
    DRIVEPLANE__SEARCH__DEFAULT_PAGE_SIZE=25
    DRIVEPLANE__DIRECTORY__SNAPSHOT_PATH=/srv/drive/snapshot.yaml
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from driveplane.config.constants import PAGE_SIZE_MAX, PORT_MAX, PORT_MIN, QUERY_LENGTH_MAX

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        DRIVEPLANE__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every query and is noisy.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class ServerConfig(BaseModel):
    """Server configuration.

    Env vars:
        DRIVEPLANE__SERVER__HOST: Bind address (default: 127.0.0.1)
        DRIVEPLANE__SERVER__PORT: Port number (default: 7655)
    """

    host: str = Field(
        default="127.0.0.1",
        description="Bind address. Use 0.0.0.0 for network access.",
    )
    port: int = Field(
        default=7655,
        description="Server port.",
    )

    @field_validator("port")
    @classmethod
    def validate_port(cls, v: int) -> int:
        if not (PORT_MIN <= v <= PORT_MAX):
            raise ValueError(f"Port must be {PORT_MIN}-{PORT_MAX}, got {v}")
        return v


class SearchConfig(BaseModel):
    """Search and reindex configuration.

    Env vars:
        DRIVEPLANE__SEARCH__DEFAULT_PAGE_SIZE: Page size when the request omits one
        DRIVEPLANE__SEARCH__REINDEX_COOLDOWN_SEC: Minimum age of the index before
            an unforced reindex is accepted
    """

    default_page_size: int = Field(
        default=50,
        ge=1,
        description="Results per page when the request does not set page_size.",
    )
    max_page_size: int = Field(
        default=PAGE_SIZE_MAX,
        ge=1,
        le=PAGE_SIZE_MAX,
        description="Largest page_size a request may ask for.",
    )
    max_query_length: int = Field(
        default=QUERY_LENGTH_MAX,
        ge=1,
        le=QUERY_LENGTH_MAX,
        description="Longest accepted query, in characters.",
    )
    reindex_cooldown_sec: float = Field(
        default=300.0,
        ge=0.0,
        description="Unforced reindex requests inside this window are rejected with 429. "
        "A full rebuild is proportional to the drive size.",
    )
    reindex_on_startup: bool = Field(
        default=True,
        description="Build the index once the directory snapshot is loaded.",
    )

    @model_validator(mode="after")
    def validate_page_sizes(self) -> "SearchConfig":
        if self.default_page_size > self.max_page_size:
            raise ValueError(
                f"default_page_size ({self.default_page_size}) exceeds "
                f"max_page_size ({self.max_page_size})"
            )
        return self


class DirectoryConfig(BaseModel):
    """Directory tree source configuration.

    Env vars:
        DRIVEPLANE__DIRECTORY__SNAPSHOT_PATH: YAML snapshot loaded at startup
    """

    snapshot_path: str | None = Field(
        default=None,
        description="YAML snapshot of files and folders. Empty drive if unset.",
    )


class DrivePlaneConfig(BaseModel):
    """Root configuration model."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    directory: DirectoryConfig = Field(default_factory=DirectoryConfig)

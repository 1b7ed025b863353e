# phantom_manager/config_models.py
# -*- coding: utf-8 -*-
"""
Pydantic models for application configuration.

This module defines the structured settings for the Phantom Tunnel manager,
including defaults, type annotations, and descriptions. Every path the
manager touches lives here, so an alternative settings object can point all
operations at a sandbox directory.
"""

from pathlib import Path
from typing import Dict, List, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# --- Default Static Values (can be overridden by config file/env/cli) ---
GITHUB_REPO_DEFAULT: str = "0fariid0/Phantom-Tunnel"
GITHUB_API_URL_DEFAULT: str = "https://api.github.com"
GITHUB_DOWNLOAD_URL_DEFAULT: str = "https://github.com"
SERVICE_NAME_DEFAULT: str = "phantom.service"
HTTP_TIMEOUT_DEFAULT: float = 120.0
STATUS_GRACE_SECONDS_DEFAULT: float = 2.0

INSTALL_DIR_DEFAULT: str = "/usr/local/bin"
WORKING_DIR_DEFAULT: str = "/etc/phantom"
SYSTEMD_DIR_DEFAULT: str = "/etc/systemd/system"
CONFIG_DB_NAME_DEFAULT: str = "config.db"
LEGACY_DIR_DEFAULT: str = "/root"

ADMIN_USERNAME_DEFAULT: str = "admin"
ADMIN_PASSWORD_DEFAULT: str = "admin"
PORT_PATTERN_DEFAULT: str = r"^[0-9]+$"

EXECUTABLE_NAMES_DEFAULT: List[str] = ["phantom", "phantom-tunnel"]
REQUIRED_TOOLS_DEFAULT: List[str] = ["curl", "grep"]

ARCHITECTURE_ASSETS_DEFAULT: Dict[str, str] = {
    "x86_64": "phantom-amd64",
    "aarch64": "phantom-arm64",
    "arm64": "phantom-arm64",
}

# Files left behind by installations that predate the /etc/phantom layout.
LEGACY_FILES_DEFAULT: List[str] = [
    "credentials.json",
    "config.json",
    "phantom.db",
    "license.key",
    "server.crt",
    "server.key",
]

TEMP_FILES_DEFAULT: List[str] = [
    "/tmp/phantom.pid",
    "/tmp/phantom-panel.log",
    "/tmp/phantom-tunnel.log",
]

UNIT_FILE_TEMPLATE_DEFAULT: str = """\
[Unit]
Description={description}
After=network-online.target
Wants=network-online.target

[Service]
ExecStart={exec_path} {start_flag}
WorkingDirectory={working_dir}
Restart=always
RestartSec={restart_sec}
LimitNOFILE={limit_nofile}
User={user}
Group={group}

[Install]
WantedBy=multi-user.target
"""

SYMBOLS_DEFAULT: Dict[str, str] = {
    "debug": "[DEBUG]",
    "info": "[INFO]",
    "success": "[SUCCESS]",
    "warning": "[WARN]",
    "error": "[ERROR]",
    "critical": "[CRITICAL]",
}

COLORS_DEFAULT: Dict[str, str] = {
    "debug": "\033[90m",
    "info": "\033[34m",
    "success": "\033[32m",
    "warning": "\033[33m",
    "error": "\033[31m",
    "critical": "\033[31m",
    "reset": "\033[0m",
}


class PathSettings(BaseModel):
    """Filesystem locations used by the manager."""

    install_dir: Path = Field(
        default=Path(INSTALL_DIR_DEFAULT),
        description="Directory the executable and its compatibility symlink are installed into.",
    )
    working_dir: Path = Field(
        default=Path(WORKING_DIR_DEFAULT),
        description="Working directory of the managed binary (holds its configuration database).",
    )
    systemd_dir: Path = Field(
        default=Path(SYSTEMD_DIR_DEFAULT),
        description="Directory the systemd unit file is written to.",
    )
    config_db_name: str = Field(
        default=CONFIG_DB_NAME_DEFAULT,
        description="File name of the managed binary's configuration database inside working_dir.",
    )
    legacy_dir: Path = Field(
        default=Path(LEGACY_DIR_DEFAULT),
        description="Directory older installations kept their data files in.",
    )
    temp_root: Optional[Path] = Field(
        default=None,
        description="Parent directory for temporary download directories. None uses the system default.",
    )


class ServiceSettings(BaseModel):
    """Values rendered into the systemd unit file."""

    description: str = Field(default="Phantom Tunnel Panel Service")
    start_flag: str = Field(
        default="--start-panel",
        description="Flag passed to the binary by the unit's ExecStart line.",
    )
    restart_sec: int = Field(default=5, ge=0)
    limit_nofile: int = Field(default=65536, gt=0)
    user: str = Field(default="root")
    group: str = Field(default="root")
    unit_template: str = Field(
        default=UNIT_FILE_TEMPLATE_DEFAULT,
        description="Template for the unit file. Supports placeholders {description}, {exec_path}, "
        "{start_flag}, {working_dir}, {restart_sec}, {limit_nofile}, {user}, {group}.",
    )


class FirstRunSettings(BaseModel):
    """Defaults for the interactive first-run setup."""

    default_username: str = Field(default=ADMIN_USERNAME_DEFAULT)
    default_password: str = Field(default=ADMIN_PASSWORD_DEFAULT, exclude=True)
    port_pattern: str = Field(
        default=PORT_PATTERN_DEFAULT,
        description="Regular expression the panel port must fully match.",
    )


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="PHANTOM_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    github_repo: str = Field(
        default=GITHUB_REPO_DEFAULT,
        description="GitHub repository (owner/name) publishing the release assets.",
    )
    github_api_url: str = Field(default=GITHUB_API_URL_DEFAULT)
    github_download_url: str = Field(default=GITHUB_DOWNLOAD_URL_DEFAULT)
    executable_names: List[str] = Field(
        default_factory=lambda: list(EXECUTABLE_NAMES_DEFAULT),
        min_length=2,
        description="Primary executable name followed by its compatibility symlink name.",
    )
    service_name: str = Field(default=SERVICE_NAME_DEFAULT)
    architecture_assets: Dict[str, str] = Field(
        default_factory=lambda: dict(ARCHITECTURE_ASSETS_DEFAULT),
        description="Maps `uname -m` values to release asset names.",
    )
    required_tools: List[str] = Field(
        default_factory=lambda: list(REQUIRED_TOOLS_DEFAULT)
    )
    http_timeout: float = Field(default=HTTP_TIMEOUT_DEFAULT, gt=0)
    status_grace_seconds: float = Field(
        default=STATUS_GRACE_SECONDS_DEFAULT,
        ge=0,
        description="Seconds to wait after starting the service before checking it is active.",
    )
    legacy_files: List[str] = Field(
        default_factory=lambda: list(LEGACY_FILES_DEFAULT)
    )
    temp_files: List[Path] = Field(
        default_factory=lambda: [Path(p) for p in TEMP_FILES_DEFAULT]
    )
    log_prefix: str = Field(
        default="", description="Prefix for console log messages."
    )
    use_color: Optional[bool] = Field(
        default=None,
        description="Force colored output on or off. None enables color when the stream is a terminal.",
    )

    paths: PathSettings = Field(default_factory=PathSettings)
    service: ServiceSettings = Field(default_factory=ServiceSettings)
    first_run: FirstRunSettings = Field(default_factory=FirstRunSettings)

    symbols: Dict[str, str] = Field(
        default_factory=lambda: dict(SYMBOLS_DEFAULT)
    )
    colors: Dict[str, str] = Field(default_factory=lambda: dict(COLORS_DEFAULT))

    @property
    def primary_executable(self) -> str:
        return self.executable_names[0]

    @property
    def executable_path(self) -> Path:
        return self.paths.install_dir / self.executable_names[0]

    @property
    def symlink_path(self) -> Path:
        return self.paths.install_dir / self.executable_names[1]

    @property
    def executable_paths(self) -> List[Path]:
        return [self.paths.install_dir / name for name in self.executable_names]

    @property
    def service_file_path(self) -> Path:
        return self.paths.systemd_dir / self.service_name

    @property
    def config_db_path(self) -> Path:
        return self.paths.working_dir / self.paths.config_db_name

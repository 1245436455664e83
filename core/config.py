"""Configuration models and loading."""

import json
import os
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from core.headers import ForwardPolicy

CONFIG_DIR = Path.home() / ".config" / "bypass-cors"
CONFIG_FILE = CONFIG_DIR / "config.json"

PORT_ENV = "PORT"
LICENSE_URL = "https://github.com/Shivam010/bypass-cors/blob/master/LICENSE"


class ProxySettings(BaseModel):
    host: str = "0.0.0.0"
    port: int = 8080
    debug: bool = False
    landing_page: Path | None = None
    forward_headers: ForwardPolicy = "none"


class LimitsSettings(BaseModel):
    upstream_timeout: float = 30.0
    keep_alive_timeout: int = 5
    max_connections: int = 100
    max_keepalive_connections: int = 20


class LicenseSettings(BaseModel):
    header: str = "license"
    url: str = LICENSE_URL


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    limits: LimitsSettings = Field(default_factory=LimitsSettings)
    license: LicenseSettings = Field(default_factory=LicenseSettings)


def load_config(config_file: Path = CONFIG_FILE) -> Config:
    """Load configuration from JSON file, creating default if needed."""
    if not config_file.exists():
        config_file.parent.mkdir(parents=True, exist_ok=True)
        default = Config()
        config_file.write_text(default.model_dump_json(indent=2))
        return default

    try:
        data = json.loads(config_file.read_text())
        return Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and recreate default
        backup = config_file.with_suffix(".json.bak")
        config_file.rename(backup)
        default = Config()
        config_file.write_text(default.model_dump_json(indent=2))
        return default


def apply_environment(config: Config, environ: dict[str, str] | None = None) -> Config:
    """Overlay the ``PORT`` environment variable onto ``config``."""
    environ = os.environ if environ is None else environ
    port = environ.get(PORT_ENV, "")
    if not port:
        return config
    proxy = config.proxy.model_copy(update={"port": int(port)})
    return config.model_copy(update={"proxy": proxy})

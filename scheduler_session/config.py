"""Configuration for the portal flow, browser and credential loading.

Settings are merged with the following precedence (highest first):
CLI overrides > environment variables > config file (YAML/JSON) > defaults.
Credentials are deliberately kept out of this model and are read from their
own environment variables by ``load_credentials_from_env``.
"""

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from .credentials import Credentials, require_credentials
from .exceptions import ConfigurationError

# Environment variables holding the credentials
IDENTITY_ENV = "MY_UH_PEOPLESOFT_ID"
SECRET_ENV = "MY_UH_PASSWORD"


class PortalSelectors(BaseModel):
    """DOM selectors used at each step of the portal flow."""
    portal_option: str = Field(default="label[for=myuh]", description="'UH Central' sign-in option")
    identity_field: str = Field(default="#userid", description="PeopleSoft ID input")
    password_field: str = Field(default="#pwd", description="Password input")
    submit_button: str = Field(default="input[type=Submit]", description="Sign-in submit control")
    dashboard_tile: str = Field(
        default="div[id='win0divPTNUI_LAND_REC_GROUPLET$3']",
        description="'Student Center' tile on the portal dashboard"
    )
    frame_container: str = Field(default="#ptifrmtgtframe", description="PeopleSoft content iframe")
    schedule_planner_button: str = Field(
        default="#PRJCS_DERIVED_PRJCS_SCHD_PLN_PB",
        description="'Schedule Planner' button inside the frame"
    )
    launch_button: str = Field(
        default="#win0divPRJCS_DERIVED_PRJCS_LAUNCH_CS",
        description="'Open Schedule Planner' control, opens a new tab"
    )
    target_ready: str = Field(
        default="#Term-options",
        description="Element present once the scheduler app has initialised"
    )


class BrowserSettings(BaseModel):
    """Browser launch settings."""
    engine: str = Field(default="chromium", description="Browser engine")
    headless: bool = Field(default=True, description="Run without a window")
    sandbox: Optional[bool] = Field(
        default=None,
        description="Force the Chrome sandbox on/off; None detects containers"
    )
    default_timeout_ms: Optional[int] = Field(
        default=None,
        ge=1000,
        description="Default wait timeout; None keeps Playwright's own default"
    )
    slow_mo: int = Field(default=0, ge=0, description="Delay between operations in ms")

    @field_validator('engine')
    @classmethod
    def validate_engine(cls, v):
        valid_engines = {'chromium', 'firefox', 'webkit'}
        if v.lower() not in valid_engines:
            raise ValueError(f"Engine must be one of: {valid_engines}")
        return v.lower()


class PortalConfig(BaseModel):
    """Complete configuration of one extraction."""

    home_url: str = Field(default="https://my.uh.edu", description="Portal home page")
    target_origin: str = Field(
        default="https://uh.collegescheduler.com",
        description="Origin of the scheduling application and its API"
    )
    target_url_fragment: str = Field(
        default="collegescheduler",
        description="Substring identifying the scheduler tab's URL"
    )
    probe_path: str = Field(default="/api/terms/", description="API endpoint used to validate cookies")
    frame_name: str = Field(default="TargetContent", description="Name of the embedded PeopleSoft frame")
    denial_header: str = Field(
        default="respondingwithsignonpage",
        description="Response header the portal sets when it re-displays sign-on"
    )
    probe_timeout_seconds: float = Field(default=30.0, gt=0, description="Timeout of the API probe")

    selectors: PortalSelectors = Field(default_factory=PortalSelectors)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)

    @field_validator('target_origin', 'home_url')
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip('/')

    @property
    def probe_url(self) -> str:
        """Full URL of the API probe."""
        return f"{self.target_origin}{self.probe_path}"


class ConfigurationLoader:
    """Loads and merges configuration from multiple sources with proper precedence."""

    ENV_PREFIX = "SCHEDULER_SESSION_"

    def __init__(self):
        self.loaded_sources = []

    def load_configuration(
        self,
        config_file: Optional[Path] = None,
        cli_overrides: Optional[Dict[str, Any]] = None
    ) -> PortalConfig:
        """Load configuration with proper precedence.

        Args:
            config_file: Optional YAML or JSON file
            cli_overrides: Nested overrides from command-line flags

        Returns:
            Merged configuration

        Raises:
            ConfigurationError: If the file is missing or any value is invalid
        """
        self.loaded_sources = ["defaults"]
        config_data: Dict[str, Any] = {}

        if config_file:
            config_file = Path(config_file)
            if not config_file.exists():
                raise ConfigurationError(f"Configuration file not found: {config_file}")
            config_data = self._merge_config(config_data, self._load_config_file(config_file))
            self.loaded_sources.append(f"config file: {config_file}")

        env_config = self._load_environment_variables()
        if env_config:
            config_data = self._merge_config(config_data, env_config)
            self.loaded_sources.append("environment variables")

        if cli_overrides:
            config_data = self._merge_config(config_data, cli_overrides)
            self.loaded_sources.append("CLI flags")

        try:
            return PortalConfig(**config_data)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

    def _load_config_file(self, config_path: Path) -> Dict[str, Any]:
        """Load configuration from a file."""
        content = config_path.read_text(encoding='utf-8')
        suffix = config_path.suffix.lower()

        try:
            if suffix in ['.yaml', '.yml']:
                return yaml.safe_load(content) or {}
            elif suffix == '.json':
                return json.loads(content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file {config_path}: {e}") from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(f"Invalid JSON in config file {config_path}: {e}") from e

        raise ConfigurationError(f"Unsupported config file format: {config_path.suffix}")

    def _load_environment_variables(self) -> Dict[str, Any]:
        """Load configuration from environment variables."""
        config: Dict[str, Any] = {}

        env_mapping = {
            f"{self.ENV_PREFIX}HOME_URL": "home_url",
            f"{self.ENV_PREFIX}TARGET_ORIGIN": "target_origin",
            f"{self.ENV_PREFIX}PROBE_PATH": "probe_path",
            f"{self.ENV_PREFIX}ENGINE": "browser.engine",
            f"{self.ENV_PREFIX}HEADLESS": "browser.headless",
            f"{self.ENV_PREFIX}SANDBOX": "browser.sandbox",
            f"{self.ENV_PREFIX}TIMEOUT_MS": "browser.default_timeout_ms",
        }

        for env_var, config_path in env_mapping.items():
            env_value = os.getenv(env_var)
            if env_value is not None:
                self._set_nested_value(config, config_path, self._convert_env_value(env_value, config_path))

        return config

    def _convert_env_value(self, value: str, config_path: str) -> Any:
        """Convert environment variable string to appropriate type."""
        if config_path.endswith(('.headless', '.sandbox')):
            return value.lower() in ('true', '1', 'yes', 'on')
        if config_path.endswith('.default_timeout_ms'):
            return int(value)
        return value

    def _set_nested_value(self, config: Dict[str, Any], path: str, value: Any):
        """Set a nested configuration value using dot notation."""
        keys = path.split('.')
        current = config

        for key in keys[:-1]:
            if key not in current:
                current[key] = {}
            current = current[key]

        current[keys[-1]] = value

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Merge configuration dictionaries, with override taking precedence."""
        if not override:
            return base

        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value

        return result


def load_configuration(
    config_file: Optional[Path] = None,
    cli_overrides: Optional[Dict[str, Any]] = None
) -> PortalConfig:
    """Convenience function to load configuration."""
    loader = ConfigurationLoader()
    return loader.load_configuration(config_file, cli_overrides)


def load_credentials_from_env(env_file: Optional[Path] = None) -> Credentials:
    """Read the credentials from the environment, after loading a ``.env`` file.

    Args:
        env_file: Explicit dotenv file; defaults to searching for ``.env``

    Returns:
        Validated Credentials

    Raises:
        ConfigurationError: If either variable is unset or empty
    """
    if env_file is not None:
        load_dotenv(env_file)
    else:
        load_dotenv(find_dotenv(usecwd=True))

    return require_credentials(
        os.getenv(IDENTITY_ENV),
        os.getenv(SECRET_ENV),
        labels={"identity": IDENTITY_ENV, "secret": SECRET_ENV},
    )

"""
Settings — Connection configuration for the Web Access connector.

Configuration precedence (highest to lowest):
  1. CLI flags (--debug)
  2. Environment variables (from .env file)
  3. DEFAULT_SETTINGS (this file)

Settings reference:
  WEBACCESS_URL              Web Access base URL (e.g., "https://sd.example.com/WebAccess")
  WEBACCESS_USERNAME         User for logon (explicit or on demand)
  WEBACCESS_PASSWORD         Password for that user
  WEBACCESS_LOGIN_ON_DEMAND  Log on automatically when a call is rejected with 403
  WEBACCESS_AUTO_LOG_OFF     Log off again after a call that logged on by itself
  WEBACCESS_TIMEOUT          Request timeout in seconds (0 = wait indefinitely)
  DEBUG                      Whether to print verbose output
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from .errors import ConfigurationError

DEFAULT_SETTINGS = {
    "WEBACCESS_LOGIN_ON_DEMAND": False,
    "WEBACCESS_AUTO_LOG_OFF": False,
    "WEBACCESS_TIMEOUT": 0,
    "DEBUG": False,
}


@dataclass(frozen=True)
class ConnectionInfo:
    """Immutable connection details shared by every request of a connector.

    Attributes:
        base_url: Web Access base URL (trailing slash stripped).
        login_on_demand: Log on and replay once when a call returns 403.
        login_user: Value sent as Ecom_User_ID.
        login_password: Value sent as Ecom_User_Password.
        auto_log_off_on_demand: Log off after a call that logged on on demand.
        timeout: Request timeout in seconds, None for no timeout.
    """

    base_url: str
    login_on_demand: bool = False
    login_user: str = ""
    login_password: str = ""
    auto_log_off_on_demand: bool = False
    timeout: Optional[float] = None

    def __post_init__(self):
        object.__setattr__(self, "base_url", (self.base_url or "").rstrip("/"))


def _env_flag(name: str) -> bool:
    return os.getenv(name, str(DEFAULT_SETTINGS[name])).lower() == "true"


def load_settings(env_file: str = "./.env", debug: bool = False) -> ConnectionInfo:
    """Build a ConnectionInfo from a .env file and the environment.

    Args:
        env_file: Path to a .env file. If the file exists, it is loaded via
                  python-dotenv. Otherwise, falls back to system environment.
        debug: Print which source was used.

    Raises:
        ConfigurationError: If WEBACCESS_TIMEOUT is not a number.
    """
    env_path = Path(env_file)
    if env_path.exists():
        load_dotenv(env_path)
        if debug:
            print(f"Loaded configuration from: {env_file}")
    elif debug:
        print(f"Warning: {env_file} not found, using defaults/environment")

    raw_timeout = os.getenv("WEBACCESS_TIMEOUT", "").strip() or str(DEFAULT_SETTINGS["WEBACCESS_TIMEOUT"])
    try:
        timeout = float(raw_timeout)
    except ValueError:
        raise ConfigurationError([f"WEBACCESS_TIMEOUT must be a number of seconds, got {raw_timeout!r}"])

    return ConnectionInfo(
        base_url=os.getenv("WEBACCESS_URL", ""),
        login_on_demand=_env_flag("WEBACCESS_LOGIN_ON_DEMAND"),
        login_user=os.getenv("WEBACCESS_USERNAME", ""),
        login_password=os.getenv("WEBACCESS_PASSWORD", ""),
        auto_log_off_on_demand=_env_flag("WEBACCESS_AUTO_LOG_OFF"),
        timeout=timeout if timeout > 0 else None,
    )


def debug_enabled() -> bool:
    """DEBUG from the environment (after load_settings has read the .env)."""
    return _env_flag("DEBUG")


def validate_settings(info: ConnectionInfo) -> List[str]:
    """Check a ConnectionInfo for missing values.

    Returns:
        A list of error messages; empty when the settings are usable.
    """
    errors = []
    if not info.base_url:
        errors.append("WEBACCESS_URL is required")
    elif not info.base_url.lower().startswith(("http://", "https://")):
        errors.append("WEBACCESS_URL must start with http:// or https://")
    if info.login_on_demand:
        if not info.login_user:
            errors.append("WEBACCESS_USERNAME is required for login on demand")
        if not info.login_password:
            errors.append("WEBACCESS_PASSWORD is required for login on demand")
    return errors

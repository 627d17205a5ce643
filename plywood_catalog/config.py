"""
Runtime settings.

- Read from environment variables and .env (never overriding variables already set).
- Loaded once and handed to the glue explicitly; the codec and formatter never see it.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from .rules import PLACEHOLDER_MARKER


def _getenv_str(name: str, default: Optional[str] = None) -> Optional[str]:
    val = os.getenv(name)
    if val is None or val == "":
        return default
    return val


def _getenv_int(name: str, default: int) -> int:
    val = os.getenv(name)
    if val is None or val == "":
        return default
    try:
        return int(val)
    except ValueError:
        return default


def _getenv_float(name: str, default: float) -> float:
    val = os.getenv(name)
    if val is None or val == "":
        return default
    try:
        return float(val)
    except ValueError:
        return default


def _getenv_bool(name: str, default: bool) -> bool:
    val = os.getenv(name)
    if val is None or val == "":
        return default
    return val.strip().lower() == "true"


def _getenv_log_level(name: str, default: str) -> str:
    val = os.getenv(name)
    if val is None or val == "":
        return default
    level = val.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        return default
    return level


@dataclass(frozen=True)
class Settings:
    # Published sheet
    csv_url: str = "REPLACE_WITH_YOUR_CSV_URL"
    cache_bust: bool = True

    # Admin writes
    apps_script_endpoint: str = "REPLACE_WITH_YOUR_APPS_SCRIPT_ENDPOINT"
    bypass_proxy: bool = False
    admin_token: str = ""
    proxy_url: str = "http://127.0.0.1:8000/api/proxy"

    # HTTP
    request_timeout: float = 10.0

    # Pages
    site_title: str = "Plywood Catalog"

    # Server
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    @property
    def csv_configured(self) -> bool:
        return bool(self.csv_url) and PLACEHOLDER_MARKER not in self.csv_url

    @property
    def script_configured(self) -> bool:
        return bool(self.apps_script_endpoint) and PLACEHOLDER_MARKER not in self.apps_script_endpoint


__SETTINGS_SINGLETON: Optional[Settings] = None


def load_settings(reload: bool = False, env_file: Optional[str] = None) -> Settings:
    """
    Load settings from environment and .env (once) with defaults.
    Use reload=True to force re-reading; env_file overrides the .env lookup.
    """
    global __SETTINGS_SINGLETON
    if __SETTINGS_SINGLETON is not None and not reload:
        return __SETTINGS_SINGLETON

    load_dotenv(env_file, override=False)

    defaults = Settings()
    settings = Settings(
        csv_url=_getenv_str("CSV_URL", defaults.csv_url) or defaults.csv_url,
        cache_bust=_getenv_bool("CACHE_BUST", defaults.cache_bust),
        apps_script_endpoint=_getenv_str("APPS_SCRIPT_ENDPOINT", defaults.apps_script_endpoint)
        or defaults.apps_script_endpoint,
        bypass_proxy=_getenv_bool("BYPASS_PROXY", defaults.bypass_proxy),
        admin_token=_getenv_str("ADMIN_TOKEN", "") or "",
        proxy_url=_getenv_str("PROXY_URL", defaults.proxy_url) or defaults.proxy_url,
        request_timeout=_getenv_float("REQUEST_TIMEOUT", defaults.request_timeout),
        site_title=_getenv_str("SITE_TITLE", defaults.site_title) or defaults.site_title,
        host=_getenv_str("HOST", defaults.host) or defaults.host,
        port=_getenv_int("PORT", defaults.port),
        log_level=_getenv_log_level("LOG_LEVEL", defaults.log_level),
    )

    __SETTINGS_SINGLETON = settings
    return settings

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Optional

import streamlit as st

CONFIG_FILE_NAME = "settings.json"
ENV_DATA_DIR = "FUEL_SALES_DATA_DIR"
ENV_API_URL = "FUEL_SALES_API_URL"
ENV_TIMEOUT = "FUEL_SALES_TIMEOUT"

SESSION_API_URL_KEY = "fuel_sales_api_url"
DEFAULT_API_URL = "http://localhost:5000/api"


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    api_base_url: str = DEFAULT_API_URL
    # None means requests wait indefinitely.
    request_timeout: Optional[float] = None
    currency: str = "RWF"


def _default_data_dir() -> Path:
    return Path.home() / ".fuel_sales"


def _load_persisted_settings(data_dir: Path) -> dict:
    cfg = data_dir / CONFIG_FILE_NAME
    if cfg.exists():
        try:
            return json.loads(cfg.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            return {}
    return {}


def _parse_timeout(raw: Any) -> Optional[float]:
    if raw is None or str(raw).strip() == "":
        return None
    try:
        timeout = float(raw)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid request timeout: {raw!r}")
    return timeout if timeout > 0 else None


def _normalize_api_url(url: str) -> str:
    url = str(url).strip().rstrip("/")
    if not url.startswith(("http://", "https://")):
        raise ValueError("API base URL must start with http:// or https://")
    return url


def resolve_settings(
    session_values: Mapping[str, Any],
    environ: Mapping[str, str],
) -> Settings:
    # Priority order:
    # 1) Session state (set via the home page)
    # 2) Environment variables
    # 3) Persisted settings in the data folder
    # 4) Defaults
    if environ.get(ENV_DATA_DIR):
        data_dir = Path(environ[ENV_DATA_DIR]).expanduser().resolve()
    else:
        data_dir = _default_data_dir()
    persisted = _load_persisted_settings(data_dir)

    if session_values.get(SESSION_API_URL_KEY):
        api_url = session_values[SESSION_API_URL_KEY]
    elif environ.get(ENV_API_URL):
        api_url = environ[ENV_API_URL]
    else:
        api_url = persisted.get("api_base_url", DEFAULT_API_URL)

    timeout = _parse_timeout(environ.get(ENV_TIMEOUT, persisted.get("request_timeout")))

    return Settings(
        data_dir=data_dir,
        api_base_url=_normalize_api_url(api_url),
        request_timeout=timeout,
    )


def persist_api_url(api_url: str, data_dir: Optional[Path] = None) -> None:
    api_url = _normalize_api_url(api_url)
    data_dir = data_dir or _default_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)

    cfg = data_dir / CONFIG_FILE_NAME
    payload = _load_persisted_settings(data_dir)
    payload["api_base_url"] = api_url
    cfg.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    # Update session for immediate effect
    st.session_state[SESSION_API_URL_KEY] = api_url


@st.cache_resource
def get_settings() -> Settings:
    return resolve_settings(dict(st.session_state), os.environ)

"""Runtime settings, read from the environment (and ``.env`` if present)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import timedelta
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[3]


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_int(*keys: str, default: int) -> int:
    v = _get_env(*keys)
    if v is None:
        return default
    return int(v)


def _get_float(*keys: str, default: float) -> float:
    v = _get_env(*keys)
    if v is None:
        return default
    return float(v)


def _get_bool(*keys: str, default: bool = False) -> bool:
    v = _get_env(*keys)
    if v is None:
        return default
    return v.lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    data_dir: Path
    catalog_ttl_minutes: int = 15
    upstream_timeout: float = 5.0
    shop_domain: str = ""
    storefront_token: str = ""
    admin_token: str = ""
    webhook_secret: str = ""
    api_version: str = "2024-01"
    currency: str = "USD"
    log_level: str = "INFO"
    log_json: bool = False

    @property
    def catalog_ttl(self) -> timedelta:
        return timedelta(minutes=self.catalog_ttl_minutes)


def load_settings(env_file: Path | None = None) -> Settings:
    load_dotenv(dotenv_path=env_file or ROOT_DIR / ".env")
    return Settings(
        data_dir=Path(_get_env("STOREFRONT_DATA_DIR", default=str(ROOT_DIR / "data"))),
        catalog_ttl_minutes=_get_int("STOREFRONT_CATALOG_TTL_MINUTES", default=15),
        upstream_timeout=_get_float("STOREFRONT_UPSTREAM_TIMEOUT", default=5.0),
        shop_domain=_get_env("SHOPIFY_STORE_DOMAIN", default="") or "",
        storefront_token=_get_env("SHOPIFY_STOREFRONT_TOKEN", default="") or "",
        admin_token=_get_env("SHOPIFY_ADMIN_API_TOKEN", default="") or "",
        webhook_secret=_get_env("SHOPIFY_WEBHOOK_SECRET", default="") or "",
        api_version=_get_env("SHOPIFY_API_VERSION", default="2024-01") or "2024-01",
        currency=_get_env("STOREFRONT_CURRENCY", default="USD") or "USD",
        log_level=(_get_env("STOREFRONT_LOG_LEVEL", default="INFO") or "INFO").upper(),
        log_json=_get_bool("STOREFRONT_LOG_JSON"),
    )

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ROOT_DIR = Path(__file__).resolve().parents[1]  # project root, next to .env.example
load_dotenv(dotenv_path=ROOT_DIR / ".env")

DEFAULT_API_ORIGIN = "https://larek-api.nomoreparties.co"


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_float(*keys: str, default: float) -> float:
    v = _get_env(*keys, default=None)
    if v is None:
        return default
    return float(v)


def _get_origin(*keys: str, default: str | None = None) -> str | None:
    v = _get_env(*keys, default=default)
    return v.rstrip("/") if v else v


@dataclass(frozen=True)
class Settings:
    bot_token: str
    api_origin: str
    mirror_origin: str | None
    content_origin: str
    api_base_path: str
    content_base_path: str
    request_timeout: float
    currency: str
    export_dir: str
    receipt_font: str | None
    log_level: str

    @property
    def api_url(self) -> str:
        return self.api_origin + self.api_base_path

    @property
    def mirror_api_url(self) -> str | None:
        # a mirror equal to the primary origin is not a second source
        if not self.mirror_origin or self.mirror_origin == self.api_origin:
            return None
        return self.mirror_origin + self.api_base_path

    @property
    def cdn_url(self) -> str:
        return self.content_origin + self.content_base_path

    def require_bot_token(self) -> str:
        if not self.bot_token:
            raise RuntimeError("BOT_TOKEN is empty. Set BOT_TOKEN in .env")
        return self.bot_token


def load_settings() -> Settings:
    api_origin = _get_origin("API_ORIGIN", "LAREK_API_ORIGIN", default=DEFAULT_API_ORIGIN) or DEFAULT_API_ORIGIN
    return Settings(
        bot_token=_get_env("BOT_TOKEN", "TELEGRAM_BOT_TOKEN", default="") or "",
        api_origin=api_origin,
        mirror_origin=_get_origin("API_MIRROR_ORIGIN", "LAREK_API_MIRROR"),
        content_origin=_get_origin("CONTENT_ORIGIN", "CDN_ORIGIN", default=api_origin) or api_origin,
        api_base_path=_get_env("API_BASE_PATH", default="/api/weblarek") or "/api/weblarek",
        content_base_path=_get_env("CONTENT_BASE_PATH", default="/content/weblarek") or "/content/weblarek",
        request_timeout=_get_float("REQUEST_TIMEOUT", default=10.0),
        currency=_get_env("CURRENCY", default="синапсов") or "синапсов",
        export_dir=_get_env("EXPORT_DIR", default=str(ROOT_DIR / "exports")) or str(ROOT_DIR / "exports"),
        receipt_font=_get_env("RECEIPT_FONT"),
        log_level=(_get_env("LOG_LEVEL", default="INFO") or "INFO").upper(),
    )


settings = load_settings()

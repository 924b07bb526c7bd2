# storefront/settings.py
from __future__ import annotations
from typing import Any, Dict, List, Optional
from pydantic import Field, AliasChoices, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import json

DEFAULT_DELIVERY_FEES: Dict[str, float] = {
    "local": 3500.0,
    "national": 5000.0,
    "international": 15000.0,
}

# 1 NGN expressed in each currency; rebased when BASE_CURRENCY is something else
DEFAULT_EXCHANGE_RATES: Dict[str, float] = {
    "NGN": 1.0,
    "USD": 0.00067,
    "EUR": 0.00061,
    "GBP": 0.00053,
    "CAD": 0.00091,
    "AUD": 0.00099,
    "JPY": 0.097,
    "CHF": 0.00059,
    "CNY": 0.0048,
    "INR": 0.056,
    "ZAR": 0.012,
    "KES": 0.086,
    "GHS": 0.0099,
}


def _parse_cors(v: Optional[str | List[str]]) -> List[str]:
    """
    Accept JSON array (e.g. '["http://localhost:8081"]') or
    comma-separated string ('http://localhost:8081,http://127.0.0.1:8081').
    """
    if v is None:
        return ["http://localhost:8081", "http://127.0.0.1:8081"]
    if isinstance(v, list):
        return v
    s = v.strip()
    if not s:
        return ["http://localhost:8081", "http://127.0.0.1:8081"]
    # try JSON first
    try:
        parsed = json.loads(s)
        if isinstance(parsed, list) and all(isinstance(x, str) for x in parsed):
            return parsed
    except ValueError:
        pass
    # fallback: comma separated
    return [p.strip() for p in s.split(",") if p.strip()]


def _parse_rate_map(v: Optional[str | Dict[str, Any]], default: Dict[str, float]) -> Dict[str, float]:
    """
    Accept a dict or a JSON object string ('{"USD": 0.0007}').
    Keys are upper-cased for currencies by the caller; bad input yields the default.
    """
    if v is None:
        return dict(default)
    if isinstance(v, dict):
        raw = v
    else:
        s = v.strip()
        if not s:
            return dict(default)
        try:
            raw = json.loads(s)
        except ValueError:
            return dict(default)
        if not isinstance(raw, dict):
            return dict(default)
    out: Dict[str, float] = {}
    for k, val in raw.items():
        try:
            num = float(val)
        except (TypeError, ValueError):
            continue
        if num > 0:
            out[str(k)] = num
    return out or dict(default)


def _rebase(rates: Dict[str, float], base: str) -> Dict[str, float]:
    """Re-express an NGN-relative table relative to `base`; empty if `base` is not in it."""
    pivot = rates.get(base.strip().upper())
    if not pivot:
        return {}
    return {k: v / pivot for k, v in rates.items()}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",   # ignore unknown env keys instead of raising
    )

    # --- API ---
    service_name: str = Field(default="storefront-pricing", validation_alias=AliasChoices("SERVICE_NAME",))
    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL",))
    cors_origins_raw: Optional[str | List[str]] = Field(
        default=None, validation_alias=AliasChoices("CORS_ORIGINS",)
    )

    # --- Pricing ---
    base_currency: str = Field(default="NGN", validation_alias=AliasChoices("BASE_CURRENCY",))
    service_fee_rate: float = Field(
        default=0.02, ge=0, le=1, validation_alias=AliasChoices("SERVICE_FEE_RATE",)
    )
    tax_rate: float = Field(
        default=0.075, ge=0, le=1, validation_alias=AliasChoices("TAX_RATE", "VAT_RATE")
    )
    delivery_fees_raw: Optional[str | Dict[str, Any]] = Field(
        default=None, validation_alias=AliasChoices("DELIVERY_FEES",)
    )
    default_delivery_tier: str = Field(
        default="international", validation_alias=AliasChoices("DEFAULT_DELIVERY_TIER",)
    )

    # --- Currency ---
    exchange_rates_raw: Optional[str | Dict[str, Any]] = Field(
        default=None, validation_alias=AliasChoices("EXCHANGE_RATES",)
    )

    @field_validator("delivery_fees_raw", "exchange_rates_raw", mode="before")
    @classmethod
    def _drop_non_mapping(cls, v: Any) -> Any:
        # env JSON such as "5000" or "[1]" decodes to a non-object; use the defaults
        return v if isinstance(v, (str, dict)) else None

    @property
    def cors_origins(self) -> List[str]:
        return _parse_cors(self.cors_origins_raw)

    @property
    def delivery_fees(self) -> Dict[str, float]:
        fees = _parse_rate_map(self.delivery_fees_raw, DEFAULT_DELIVERY_FEES)
        return {k.strip().lower(): v for k, v in fees.items()}

    @property
    def exchange_rates(self) -> Dict[str, float]:
        rates = _parse_rate_map(self.exchange_rates_raw, {})
        if not rates:
            rates = _rebase(DEFAULT_EXCHANGE_RATES, self.base_currency)
        rates = {k.strip().upper(): v for k, v in rates.items()}
        rates[self.base_currency.upper()] = 1.0
        return rates

# singleton
settings = Settings()

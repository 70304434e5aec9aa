"""
CoCart Client - Fetch and Transform

Fetches decoded responses through the extract layer and runs them through
the timezone and currency passes configured on the client. Settings can
be changed between calls; each response is transformed with the settings
current at the time it arrives.
"""

import logging
from typing import Any, Callable, Dict, Optional

import requests

from cocart_transform.coreutils.env import env_bool, env_get
from cocart_transform.coreutils.time import resolve_host_timezone
from cocart_transform.extract.cocart_api import CoCartAPIClient
from cocart_transform.transformation.config import (
    CurrencyOptions,
    TimezoneOptions,
    normalize_currency_config,
    normalize_timezone_config,
)
from cocart_transform.transformation.currency import (
    CurrencyFormatter,
    create_currency_formatter,
)
from cocart_transform.transformation.schemas import (
    CurrencyFormatterConfig,
    TimezoneConversionOptions,
)
from cocart_transform.transformation.transformers import (
    create_currency_transformer,
    create_timezone_transformer,
)

logger = logging.getLogger(__name__)


class CoCartClient:
    """CoCart API client that returns display-ready responses"""

    def __init__(
        self,
        site_url: str,
        currency: CurrencyOptions = None,
        timezone_conversion: TimezoneOptions = None,
        timezone_resolver: Optional[Callable[[], str]] = None,
        session: Optional[requests.Session] = None,
        **api_options,
    ):
        """
        Initialize the CoCart client

        Args:
            site_url: WordPress site URL
            currency: Currency formatting options or bool
            timezone_conversion: Timezone conversion options or bool
            timezone_resolver: Host timezone lookup (defaults to the TZ / local zone)
            session: Optional requests session (a retrying one is created otherwise)
            **api_options: api_prefix, api_namespace, api_version, timeout
        """
        self.api = CoCartAPIClient(site_url, session=session, **api_options)
        self.timezone_resolver = timezone_resolver or resolve_host_timezone
        self.currency_config = normalize_currency_config(currency)
        self.timezone_config = normalize_timezone_config(
            timezone_conversion, self.timezone_resolver
        )
        self.currency_formatter: CurrencyFormatter = create_currency_formatter()

        logger.info(
            f"CoCart client for {self.api.base_url} "
            f"(currency={self.currency_config.enabled}, "
            f"timezone={self.timezone_config.enabled})"
        )

    @classmethod
    def from_env(cls, **overrides) -> "CoCartClient":
        """
        Build a client from environment variables (.env supported)

        COCART_SITE_URL, COCART_CURRENCY_FORMAT, COCART_TIMEZONE_CONVERSION,
        COCART_STORE_TIMEZONE, COCART_TARGET_TIMEZONE
        """
        site_url = overrides.pop("site_url", None) or env_get("COCART_SITE_URL")
        if not site_url:
            raise ValueError("COCART_SITE_URL is not set")

        timezone_options: Dict[str, Any] = {
            "enabled": env_bool("COCART_TIMEZONE_CONVERSION"),
        }
        store_timezone = env_get("COCART_STORE_TIMEZONE")
        if store_timezone:
            timezone_options["store_timezone"] = store_timezone
        target_timezone = env_get("COCART_TARGET_TIMEZONE")
        if target_timezone:
            timezone_options["target_timezone"] = target_timezone

        overrides.setdefault("currency", env_bool("COCART_CURRENCY_FORMAT"))
        overrides.setdefault("timezone_conversion", timezone_options)
        return cls(site_url, **overrides)

    def transform_response(self, data: Any, endpoint: Optional[str] = None) -> Any:
        """Apply the timezone pass, then the currency pass"""
        data = create_timezone_transformer(self.timezone_config)(data, endpoint)
        return create_currency_transformer(self.currency_config)(data, endpoint)

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Fetch an endpoint and return the transformed response

        Raises:
            requests.RequestException: On HTTP errors
            ValueError: On invalid JSON responses
        """
        data = self.api.get(endpoint, params=params)
        return self.transform_response(data, endpoint)

    def get_timezone_config(self) -> TimezoneConversionOptions:
        return self.timezone_config.copy()

    def update_timezone_config(self, **changes) -> None:
        """Shallow-merge changes into the timezone settings"""
        merged = {**vars(self.get_timezone_config()), **changes}
        merged.pop("timezone_resolver", None)
        self.timezone_config = normalize_timezone_config(merged, self.timezone_resolver)

    def get_currency_config(self) -> CurrencyFormatterConfig:
        return self.currency_config.copy()

    def update_currency_config(self, **changes) -> None:
        """
        Shallow-merge changes into the currency settings

        Changes go through normalize_currency_config: unknown or malformed
        keys are ignored, and enabling without naming auto_format /
        preserve_original switches those on as well.
        """
        merged = vars(self.get_currency_config())
        if changes.get("enabled") is True:
            for key in ("auto_format", "preserve_original"):
                if key not in changes:
                    merged.pop(key)
        merged.update(changes)
        self.currency_config = normalize_currency_config(merged)

    def is_currency_format_enabled(self) -> bool:
        return self.currency_config.enabled and self.currency_config.auto_format

    def set_currency_format_enabled(self, enabled: bool) -> None:
        self.currency_config = self.currency_config.copy(
            enabled=enabled, auto_format=enabled
        )

    def close(self) -> None:
        self.api.close()

    def __enter__(self) -> "CoCartClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

"""
CoCart API Client - Pure I/O Operations

This module handles GET requests against a CoCart REST API with no
transformation logic. Returns decoded JSON for the transformation layer.
"""

import logging
import time
from typing import Any, Dict, Optional

import requests

from cocart_transform.coreutils.request import get_data, new_session

logger = logging.getLogger(__name__)

# URL layout: <site_url>/<api_prefix>/<api_namespace>/<api_version>
DEFAULT_API_PREFIX = "wp-json"
DEFAULT_API_NAMESPACE = "cocart"
DEFAULT_API_VERSION = "v2"

DEFAULT_TIMEOUT = 30  # seconds


def build_base_url(
    site_url: str,
    api_prefix: str = DEFAULT_API_PREFIX,
    api_namespace: str = DEFAULT_API_NAMESPACE,
    api_version: str = DEFAULT_API_VERSION,
) -> str:
    """Join the site URL and API path, without trailing slashes"""
    base_url = f"{site_url.rstrip('/')}/{api_prefix}/{api_namespace}/{api_version}"
    return base_url.rstrip("/")


class CoCartAPIClient:
    """Pure API client for CoCart endpoints"""

    def __init__(
        self,
        site_url: str,
        api_prefix: str = DEFAULT_API_PREFIX,
        api_namespace: str = DEFAULT_API_NAMESPACE,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = DEFAULT_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = build_base_url(site_url, api_prefix, api_namespace, api_version)
        self.timeout = timeout
        self.session = session or new_session()

    def endpoint_url(self, endpoint: str) -> str:
        return f"{self.base_url}/{endpoint.lstrip('/')}"

    def get(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        Fetch an endpoint and decode its JSON body

        Args:
            endpoint: Path below the API base, e.g. 'cart' or 'store'
            params: Optional query parameters

        Returns:
            Decoded JSON response

        Raises:
            requests.RequestException: On HTTP errors
            ValueError: On invalid JSON responses
        """
        url = self.endpoint_url(endpoint)
        logger.info(f"Fetching from {url}")
        start_time = time.time()

        data = get_data(self.session, url, params=params, timeout=self.timeout)

        logger.info(f"Fetched from {url}: {time.time() - start_time:.2f} seconds")
        return data

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "CoCartAPIClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

import logging
import time
from urllib3.util.retry import Retry
import requests
from requests.adapters import HTTPAdapter
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

USER_AGENT = "cocart-transform/1.0"

DEFAULT_RETRY_STRATEGY = Retry(
    total=3,  # Total number of retries
    backoff_factor=1,  # The backoff factor (1 second, then 2, 4...)
    status_forcelist=[429, 500, 502, 503, 504],  # HTTP status codes to retry on
    allowed_methods=["GET"],
)


def new_session(retry_strategy: Optional[Retry] = None) -> requests.Session:
    """Create a new requests session with retry strategy"""
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=retry_strategy or DEFAULT_RETRY_STRATEGY)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    # Set default headers
    session.headers.update({"User-Agent": USER_AGENT, "Accept": "application/json"})

    return session


def get_data(
    session: requests.Session,
    url: str,
    headers: Optional[Dict[str, str]] = None,
    params: Optional[Dict[str, Any]] = None,
    timeout: float = 30,
) -> Any:
    """Fetch a URL and decode its JSON body.

    Retries are handled by the session's adapter (see new_session).

    Args:
        session: HTTP session to use
        url: URL to fetch
        headers: Optional extra headers
        params: Optional query parameters
        timeout: Request timeout in seconds

    Returns:
        Parsed JSON response (object, array or scalar)

    Raises:
        requests.RequestException: On HTTP errors
        ValueError: On invalid JSON responses
    """
    start = time.time()

    try:
        response = session.get(url, headers=headers, params=params, timeout=timeout)
        response.raise_for_status()
    except requests.RequestException as e:
        logger.error(f"❌ HTTP request failed for {url}: {e}")
        raise requests.RequestException(f"HTTP request failed for {url}: {e}") from e

    try:
        data = response.json()
    except ValueError as e:
        logger.error(f"❌ Invalid JSON response from {url}: {e}")
        raise ValueError(f"Invalid JSON response from {url}: {e}") from e

    logger.debug(f"Fetched from {url}: {time.time() - start:.2f} seconds")
    return data

"""CDN Client"""

import asyncio

import httpx
import pybreaker

from ..core import get_logger

logger = get_logger(__name__)


class CDNClient:
    """
    Fetches published package files (type declarations, ES module entries)
    with circuit breaker protection.

    Failures never raise: callers get ``None`` and degrade.
    """

    def __init__(
        self,
        timeout: float = 10.0,
        fail_max: int = 5,
        reset_timeout: int = 30,
    ) -> None:
        """
        Initialize CDN client with circuit breaker.

        Args:
            timeout: Request timeout in seconds
            fail_max: Consecutive failures before the breaker opens
            reset_timeout: Seconds before the breaker lets a trial request through
        """
        self.timeout = timeout
        self._client = httpx.Client(timeout=timeout, follow_redirects=True)

        class BreakerListener(pybreaker.CircuitBreakerListener):
            """Listener for circuit breaker state changes."""

            def state_change(self, cb, old_state, new_state):
                logger.warning(
                    "breaker_state_change",
                    breaker=cb.name,
                    from_state=str(old_state),
                    to_state=str(new_state),
                )

        self._breaker = pybreaker.CircuitBreaker(
            fail_max=fail_max,
            reset_timeout=reset_timeout,
            name="cdn-http",
            listeners=[BreakerListener()],
        )

        logger.info("client_init", timeout=timeout)

    def fetch_text_sync(self, url: str) -> str | None:
        """
        Fetch a text resource.

        Args:
            url: Absolute resource URL

        Returns:
            Response body, or None on HTTP error, network error or open breaker
        """
        try:

            def _make_request():
                return self._client.get(url)

            response = self._breaker.call(_make_request)
            response.raise_for_status()
            return response.text

        except pybreaker.CircuitBreakerError:
            logger.error("fetch_failed", url=url, error="Circuit breaker open - CDN unavailable")
            return None
        except httpx.HTTPStatusError as e:
            logger.debug("fetch_status", url=url, status=e.response.status_code)
            return None
        except httpx.HTTPError as e:
            logger.warning("http_error", url=url, error=str(e))
            return None

    async def fetch_text(self, url: str) -> str | None:
        """Async variant; the request runs in a worker thread."""
        return await asyncio.to_thread(self.fetch_text_sync, url)

    def close(self) -> None:
        self._client.close()

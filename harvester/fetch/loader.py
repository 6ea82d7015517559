"""Page acquisition with retries and a per-page time budget."""
import asyncio
import logging
import time
from typing import Awaitable, Callable, Optional

import httpx
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_exception_type,
    wait_incrementing,
)

from harvester.config import config

logger = logging.getLogger(__name__)


class LoadError(Exception):
    """A page could not be loaded."""


class NetworkError(LoadError):
    """The navigation itself failed."""


class NoResponse(LoadError):
    """The navigation returned no response."""


class BadStatus(LoadError):
    """The response status was not 200."""

    def __init__(self, status: Optional[int], url: str = ""):
        self.status = status
        self.url = url
        super().__init__(f"Wrong response status ( {status} ) for {url}")


class TimeoutExceeded(LoadError):
    """Retries ran past the time budget."""

    def __init__(self, message: str, last_error: Optional[BaseException] = None):
        super().__init__(message)
        self.last_error = last_error


class _BudgetExhausted:
    """tenacity stop condition: elapsed wall time exceeds the budget."""

    def __init__(self, started: float, budget: float, clock: Callable[[], float]):
        self.started = started
        self.budget = budget
        self.clock = clock

    def __call__(self, retry_state: RetryCallState) -> bool:
        return self.clock() - self.started > self.budget


class PageLoader:
    """Opens a page and navigates to a URL until it loads or the budget runs out."""

    def __init__(
        self,
        session,
        timeout_budget: float = config.SCRAPE_SITE_TIMEOUT,
        max_backoff: int = config.MAX_BACKOFF,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.session = session
        self.timeout_budget = timeout_budget
        self.max_backoff = max_backoff
        self._sleep = sleep
        self._clock = clock

    async def acquire(self, url: str, service_name: str, timeout_budget: Optional[float] = None):
        """Return a loaded page, retrying transient failures with backoff.

        Raises:
            TimeoutExceeded: the budget ran out; ``last_error`` holds the
                failure of the final attempt.
        """
        budget = self.timeout_budget if timeout_budget is None else timeout_budget
        retrying = AsyncRetrying(
            stop=_BudgetExhausted(self._clock(), budget, self._clock),
            wait=wait_incrementing(start=1, increment=1, max=self.max_backoff),
            retry=retry_if_exception_type(LoadError),
            sleep=self._sleep,
            before_sleep=lambda state: self._log_retry(service_name, state),
        )
        try:
            async for attempt in retrying:
                with attempt:
                    page = await self._load_page(url, service_name)
        except RetryError as e:
            last_error = e.last_attempt.exception()
            raise TimeoutExceeded(
                f"[{service_name}] Scraping exceeded {budget}s while loading {url}: {last_error}",
                last_error=last_error,
            ) from last_error
        return page

    def _log_retry(self, service_name: str, retry_state: RetryCallState) -> None:
        timeout = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.debug(
            f"[{service_name}] Setting retry #{retry_state.attempt_number} timeout: {timeout}s "
            f"({retry_state.outcome.exception()})"
        )

    async def _load_page(self, url: str, service_name: str):
        started = self._clock()
        page = await self.session.new_page()
        logger.debug(f"[{service_name}] new_page execution time: {self._clock() - started:.3f}s")

        try:
            started = self._clock()
            try:
                response = await page.goto(url)
            except httpx.HTTPError as err:
                raise NetworkError(f"Navigation to {url} failed: {err}") from err
            logger.debug(f"[{service_name}] goto execution time: {self._clock() - started:.3f}s")

            if response is None:
                raise NoResponse(f"Could not get a response for {url}")
            if response.status_code != 200:
                raise BadStatus(response.status_code, url)
        except LoadError as err:
            await page.close()
            logger.warning(f"[{service_name}] Unable to correctly load page {url}: {err}")
            raise
        except BaseException:
            # Not retryable, but the page must not outlive the attempt
            await page.close()
            raise
        return page

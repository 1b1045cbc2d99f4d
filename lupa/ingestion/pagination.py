"""
Paged collection over the Câmara listing endpoints.

Two strategies:

* collect_linked: follow rel="next" links one page at a time. Used where
  listings are small (deputies, one deputy's expenses).
* collect_adaptive: fetch page 1, learn the page count from the rel="last"
  link, then fetch the remaining pages in parallel. Used for the large
  year-scoped listings (roll calls, propositions, events).
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Generic, List, Optional, Type, TypeVar

from tenacity import AsyncRetrying, before_sleep_log, retry_if_exception_type, stop_after_attempt

from lupa.config.settings import settings
from lupa.ingestion.client import FetchError, RateLimitedClient
from lupa.ingestion.schemas.camara import ListResponse
from lupa.ingestion.workers import run_pool

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class PagedResult(Generic[T]):
    """Items gathered by an adaptive collection plus the pages given up on."""
    items: List[T] = field(default_factory=list)
    pages_fetched: int = 0
    failed_pages: List[int] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed_pages


async def collect_linked(
    client: RateLimitedClient,
    url: str,
    model: Type[ListResponse],
) -> List[T]:
    """
    Follow "next" links until a page has none.

    Errors propagate: a partial listing is not returned.
    """
    items: List[T] = []
    next_url: Optional[str] = url
    while next_url:
        page = await client.get_json(next_url, model)
        items.extend(page.dados)
        next_url = page.link("next")
    return items


async def collect_adaptive(
    client: RateLimitedClient,
    page_url: Callable[[int], str],
    model: Type[ListResponse],
    workers: int | None = None,
    max_pages: int | None = None,
    retries: int | None = None,
) -> PagedResult[T]:
    """
    Fetch every page of a listing, pages 2..N in parallel.

    Args:
        client: Client of the source being listed
        page_url: Builds the URL of page n (1-based)
        model: Listing envelope to decode each page into
        workers: Parallel page fetchers
        max_pages: Page ceiling when the first page has no "last" link;
            a declared last page is always honoured
        retries: Extra attempts for a page that fails

    Returns:
        PagedResult with items in page order. Empty pages are treated as
        past the end; pages that still fail after retries are listed in
        failed_pages.

    Raises:
        FetchError: if page 1 cannot be fetched
    """
    workers = workers if workers is not None else settings.PAGE_WORKERS
    max_pages = max_pages if max_pages is not None else settings.ADAPTIVE_MAX_PAGES
    retries = retries if retries is not None else settings.ADAPTIVE_PAGE_RETRIES

    first = await client.get_json(page_url(1), model)
    result: PagedResult[T] = PagedResult(items=list(first.dados), pages_fetched=1)
    if not first.dados:
        return result

    last_page = first.last_page()
    if last_page is None:
        last_page = max_pages
        logger.debug(f"No last link on {page_url(1)}, scanning up to page {max_pages}")

    pages: dict[int, List[T]] = {}

    async def fetch_page(number: int) -> None:
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(retries + 1),
                retry=retry_if_exception_type(FetchError),
                before_sleep=before_sleep_log(logger, logging.DEBUG),
                reraise=True,
            ):
                with attempt:
                    page = await client.get_json(page_url(number), model)
        except FetchError as e:
            result.failed_pages.append(number)
            logger.warning(f"Giving up on page {number} after {retries + 1} attempts: {e}")
            return
        if page.dados:
            pages[number] = page.dados

    await run_pool(range(2, last_page + 1), fetch_page, workers=workers, label="pages")

    for number in sorted(pages):
        result.items.extend(pages[number])
    result.pages_fetched += len(pages)
    result.failed_pages.sort()
    return result

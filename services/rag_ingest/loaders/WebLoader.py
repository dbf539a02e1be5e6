"""Loader that crawls a website from a seed URL and turns its pages into Documents."""

import asyncio
from urllib.parse import urlparse

from services.rag_ingest.loaders.html_cleaner import parse_page
from shared.clients.crawl.http.CrawlClientHttp import CrawlClientHttp
from shared.helper.HelperConfig import HelperConfig
from shared.helper.time_helper import now_iso
from shared.models.document import Document, UrlMeta
from shared.models.errors import LoaderError, ProviderError
from shared.models.web import CrawledPage, FetchedPage

MAX_CRAWL_DEPTH = 4
DEFAULT_EXCLUDED_SEGMENTS = ["admin", "login", "register", "cart", "checkout"]

NO_CONTENT = "No content could be extracted from the provided URL"
NO_MEANINGFUL_CONTENT = "No meaningful content found on the provided URL"


def is_valid_url(url: str) -> bool:
    parsed = urlparse(url)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class WebLoader:
    """Breadth-first crawler bounded by depth, page count and the seed's URL prefix.

    Links are only followed when they stay below the seed URL and contain no
    denylisted path segment. Pages are cleaned of script/style/nav/header/footer
    markup, then filtered: pages under a denylisted segment (the seed included)
    and pages with too little text are dropped before chunking.
    """

    def __init__(self, helper_config: HelperConfig, crawl_client: CrawlClientHttp) -> None:
        self.logging = helper_config.get_logger()
        self._crawl_client = crawl_client
        max_depth = int(helper_config.get_number_val("INGEST_URL_MAX_DEPTH", default=MAX_CRAWL_DEPTH))
        self.max_depth = max(0, min(max_depth, MAX_CRAWL_DEPTH))
        self.max_pages = int(helper_config.get_number_val("INGEST_URL_MAX_PAGES", default=200))
        self.min_chars = int(helper_config.get_number_val("INGEST_URL_MIN_CHARS", default=100))
        self.concurrency = int(helper_config.get_number_val("INGEST_URL_CONCURRENCY", default=5))
        self.excluded_segments = {
            segment.lower() for segment in helper_config.get_list_val("INGEST_URL_EXCLUDE_DIRS", default=DEFAULT_EXCLUDED_SEGMENTS)
        }

    ##########################################
    ################ FILTERS #################
    ##########################################

    def is_excluded(self, url: str) -> bool:
        """True when any path segment of the URL is on the denylist."""
        segments = [segment.lower() for segment in urlparse(url).path.split("/") if segment]
        return any(segment in self.excluded_segments for segment in segments)

    @staticmethod
    def get_scope_prefix(seed_url: str) -> str:
        """The URL prefix every followed link must start with.

        The seed without query and fragment; a trailing file name (e.g. index.html)
        is dropped so sibling pages stay in scope.
        """
        parsed = urlparse(seed_url)
        path = parsed.path or "/"
        last = path.rsplit("/", 1)[-1]
        if "." in last:
            path = path[: len(path) - len(last)]
        return f"{parsed.scheme}://{parsed.netloc}{path}"

    def is_meaningful(self, page: CrawledPage) -> bool:
        return not self.is_excluded(page.url) and len(page.text.strip()) > self.min_chars

    ##########################################
    ################# CRAWL ##################
    ##########################################

    async def _fetch(self, url: str, sem: asyncio.Semaphore) -> FetchedPage | None:
        async with sem:
            return await self._crawl_client.do_fetch_page(url)

    async def do_crawl(self, seed_url: str) -> list[CrawledPage]:
        """Crawl from seed_url up to max_depth link hops.

        Fetch failures of linked pages are logged and skipped. A transport
        failure or timeout on the seed itself is raised, since nothing can be
        crawled without it.

        Returns:
            list[CrawledPage]: Cleaned HTML pages in breadth-first order.

        Raises:
            ProviderError: If the seed page cannot be fetched.
        """
        scope = self.get_scope_prefix(seed_url)
        sem = asyncio.Semaphore(self.concurrency)
        visited: set[str] = {seed_url}
        crawled: set[str] = set()
        frontier: list[str] = [seed_url]
        pages: list[CrawledPage] = []

        for depth in range(self.max_depth + 1):
            if not frontier:
                break
            results = await asyncio.gather(
                *[self._fetch(url, sem) for url in frontier],
                return_exceptions=True,
            )
            next_frontier: list[str] = []
            for url, result in zip(frontier, results):
                if isinstance(result, ProviderError):
                    if depth == 0:
                        raise result
                    self.logging.warning("Skipping %s: %s", url, result.detail)
                    continue
                if isinstance(result, BaseException):
                    raise result
                if result is None or not result.is_html():
                    continue
                # redirects can land several requests on the same final URL
                if result.url in crawled:
                    continue
                crawled.add(result.url)
                visited.add(result.url)

                title, text, links = parse_page(result.text, result.url)
                pages.append(CrawledPage(url=result.url, title=title, text=text, depth=depth))

                if depth >= self.max_depth:
                    continue
                for link in links:
                    if link in visited or not link.startswith(scope) or self.is_excluded(link):
                        continue
                    visited.add(link)
                    next_frontier.append(link)

            remaining = self.max_pages - len(pages)
            if remaining <= 0:
                self.logging.info("Reached the crawl limit of %d pages.", self.max_pages)
                break
            frontier = next_frontier[:remaining]

        return pages

    async def do_load(self, seed_url: str) -> list[Document]:
        """Crawl a website and return one Document per meaningful page.

        Args:
            seed_url (str): Validated http(s) URL to start from.

        Returns:
            list[Document]: Documents with UrlMeta provenance.

        Raises:
            LoaderError: If no page could be crawled, or none survived filtering.
            ProviderError: If the seed page cannot be fetched.
        """
        self.logging.info("Starting to crawl: %s (max depth %d)", seed_url, self.max_depth, color="cyan")
        pages = await self.do_crawl(seed_url)
        self.logging.info("Collected %d raw page(s) from %s", len(pages), seed_url)
        if not pages:
            raise LoaderError(NO_CONTENT)

        meaningful = [page for page in pages if self.is_meaningful(page)]
        self.logging.info("Filtered to %d meaningful page(s)", len(meaningful))
        if not meaningful:
            raise LoaderError(NO_MEANINGFUL_CONTENT)

        timestamp = now_iso()
        return [
            Document(
                content=page.text,
                metadata=UrlMeta(source=page.url, timestamp=timestamp, title=page.title, depth=page.depth),
            )
            for page in meaningful
        ]

# SiteTrail — Crawl orchestration (sitemap phase, then optional HTML link phase)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import logging
import time
from typing import Optional

from .links import DEFAULT_MAX_DEPTH, HtmlLinkCrawler
from .result import CrawlResult, CrawlState
from .session import Pacer, make_session
from .sitemap import SitemapResolver
from ..utils.urls import is_absolute_http_url, sitemap_filename, url_origin


logger = logging.getLogger(__name__)

PROGRESS_EVERY = 10


class InvalidSitemapUrl(ValueError):
	"""Entry sitemap URL is missing or not an absolute http(s) URL."""


class CrawlOptions:
	def __init__(
		self,
		delay_ms: int = 500,
		crawl_html_links: bool = False,
		max_depth: int = DEFAULT_MAX_DEPTH,
	):
		self.delay_ms = max(0, int(delay_ms))
		self.crawl_html_links = bool(crawl_html_links)
		self.max_depth = max(0, int(max_depth))

	@property
	def delay(self) -> float:
		return self.delay_ms / 1000.0


class Crawler:
	"""Sequential sitemap + link crawler producing one CrawlResult per call."""

	def __init__(
		self,
		user_agent: str,
		timeout: float = 10.0,
		max_redirects: int = 5,
		retries: int = 0,
		backoff: float = 0.5,
		session=None,
		pacer: Optional[Pacer] = None,
	) -> None:
		self.session = session or make_session(user_agent=user_agent, retries=retries, backoff=backoff, max_redirects=max_redirects)
		self.pacer = pacer or Pacer()
		self.timeout = timeout

	def crawl(self, sitemap_url: str, options: Optional[CrawlOptions] = None, stop_flag: Optional[callable] = None) -> CrawlResult:
		options = options or CrawlOptions()
		if not sitemap_url or not isinstance(sitemap_url, str) or not is_absolute_http_url(sitemap_url.strip()):
			raise InvalidSitemapUrl(f"Invalid sitemap URL provided: {sitemap_url!r}")
		sitemap_url = sitemap_url.strip()
		origin = url_origin(sitemap_url)
		state = CrawlState(stop_flag=stop_flag)

		entry_name = sitemap_filename(sitemap_url)
		state.log_status(f"Starting crawl from: {entry_name}")
		state.log_status(f"Initial source path will be: {entry_name}")
		resolver = SitemapResolver(self.session, pacer=self.pacer, timeout=self.timeout)
		resolver.resolve(sitemap_url, entry_name, state, options.delay)
		logger.info("Sitemap phase completed. Found %d URLs from sitemap", len(state.urls))

		if options.crawl_html_links:
			self._crawl_html(origin, state, options)
		else:
			state.log_status("HTML link crawling is disabled")

		if state.stopped:
			state.log_status("Crawl stopped by caller")
		state.log_status(f"Crawl completed. Total unique URLs found: {len(state.urls)}")
		logger.info("Final results: %d unique URLs, %d errors", len(state.urls), len(state.errors))
		return state.snapshot(sitemap_url)

	def _crawl_html(self, origin: str, state: CrawlState, options: CrawlOptions) -> None:
		seeds = list(state.urls)
		state.log_status(f"Starting HTML link crawling for {len(seeds)} URLs...")
		state.log_status(f"Base domain: {origin}")
		crawler = HtmlLinkCrawler(self.session, pacer=self.pacer, timeout=self.timeout, max_depth=options.max_depth)
		started = time.monotonic()
		crawled = 0
		for seed in seeds:
			if state.should_stop():
				break
			crawler.crawl(seed, origin, state, options.delay, depth=0)
			crawled += 1
			elapsed = time.monotonic() - started
			logger.info(
				"HTML crawl progress: %d/%d seeds, %.1fs elapsed, total URLs: %d",
				crawled, len(seeds), elapsed, len(state.urls),
			)
			if crawled % PROGRESS_EVERY == 0:
				state.log_status(f"HTML crawl progress: {crawled}/{len(seeds)} pages crawled, total URLs: {len(state.urls)}")
		state.log_status(
			f"HTML link crawling completed. Total URLs found: {len(state.urls)} "
			f"(started with {len(seeds)} from sitemap)"
		)

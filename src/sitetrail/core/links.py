# SiteTrail — HTML link crawler (depth-limited, visited-set guarded)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import logging
from typing import Optional

from .extract import extract_links
from .result import CrawlState, html_source
from .session import Pacer
from ..utils.net import content_type
from ..utils.urls import normalize_url


logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 10
SAMPLE_LINKS = 3


class HtmlLinkCrawler:
	"""Follows same-origin anchors from a seed page, one page at a time.

	Every page is fetched at most once per crawl state. Newly seen pages are
	recorded with an HTML_CRAWL source; pages already known keep their source.
	"""

	def __init__(self, session, pacer: Optional[Pacer] = None, timeout: float = 10.0, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
		self.session = session
		self.pacer = pacer or Pacer()
		self.timeout = timeout
		self.max_depth = max_depth

	def _get_html(self, url: str):
		r = self.session.get(url, timeout=self.timeout, allow_redirects=True)
		r.raise_for_status()
		return r

	def crawl(self, url: str, origin: str, state: CrawlState, delay: float = 0.0, depth: int = 0) -> None:
		if depth >= self.max_depth:
			logger.debug("Max depth reached (%d) for %s", self.max_depth, url)
			return
		page = normalize_url(url)
		if not page:
			logger.debug("Failed to normalize URL: %s", url)
			return
		if page in state.visited:
			logger.debug("Already visited, skipping: %s", page)
			return
		if state.should_stop():
			return
		state.visited.add(page)

		try:
			self.pacer.wait(delay, state.should_stop)
			if state.should_stop():
				return
			state.log_status(f"Crawling HTML: {page} (depth: {depth})")
			r = self._get_html(page)
		except Exception as e:
			state.log_error(f"Error crawling HTML {page}: {str(e) or type(e).__name__}")
			return

		ctype = content_type(r)
		if "text/html" not in ctype:
			state.log_status(f"Skipping non-HTML content: {page} ({ctype})")
			return

		state.add_url(page, html_source(depth))

		try:
			links = extract_links(r.content, page, origin)
		except Exception as e:
			state.log_error(f"Error crawling HTML {page}: {str(e) or type(e).__name__}")
			return
		if not links:
			state.log_status(f"No internal links found on {page}")
			return
		state.log_status(f"Found {len(links)} internal links on {page}")
		state.log_status(f"Sample links: {', '.join(links[:SAMPLE_LINKS])}")
		for i, link in enumerate(links, 1):
			if state.should_stop():
				return
			logger.debug("Processing link %d/%d: %s", i, len(links), link)
			self.crawl(link, origin, state, delay, depth + 1)

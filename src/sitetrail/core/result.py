# SiteTrail — Crawl state and result models
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import logging
from typing import Any, Dict, Iterable, List, Optional, Set, Tuple


logger = logging.getLogger(__name__)

HTML_SOURCE_SEED = "HTML_CRAWL:sitemap"
HTML_SOURCE_DEPTH = "HTML_CRAWL:depth_{depth}"


def html_source(depth: int) -> str:
	if depth == 0:
		return HTML_SOURCE_SEED
	return HTML_SOURCE_DEPTH.format(depth=depth)


class UrlEntry:
	__slots__ = ("url", "source")

	def __init__(self, url: str, source: str) -> None:
		self.url = url
		self.source = source

	def to_dict(self) -> Dict[str, str]:
		return {"url": self.url, "source": self.source}

	def __eq__(self, other: object) -> bool:
		if not isinstance(other, UrlEntry):
			return NotImplemented
		return self.url == other.url and self.source == other.source

	def __repr__(self) -> str:
		return f"UrlEntry(url={self.url!r}, source={self.source!r})"


class CrawlState:
	"""Mutable discovery state for one crawl invocation.

	The url map is shared by the sitemap resolver and the HTML crawler; the first
	source recorded for a URL is kept for the rest of the run.
	"""

	def __init__(self, stop_flag: Optional[callable] = None) -> None:
		self.urls: Dict[str, UrlEntry] = {}
		self.visited: Set[str] = set()
		self.visited_sitemaps: Set[str] = set()
		self.status: List[str] = []
		self.errors: List[str] = []
		self.stop_flag = stop_flag
		self.stopped = False

	def add_url(self, url: str, source: str) -> bool:
		existing = self.urls.get(url)
		if existing is not None:
			logger.debug("URL already exists with source %r: %s", existing.source, url)
			return False
		self.urls[url] = UrlEntry(url, source)
		logger.debug("Added URL with source %r: %s (total: %d)", source, url, len(self.urls))
		return True

	def log_status(self, message: str) -> None:
		self.status.append(message)
		logger.info(message)

	def log_warning(self, message: str) -> None:
		self.status.append(message)
		logger.warning(message)

	def log_error(self, message: str) -> None:
		self.errors.append(message)
		self.status.append(message)
		logger.error(message)

	def should_stop(self) -> bool:
		if self.stopped:
			return True
		if self.stop_flag and self.stop_flag():
			self.stopped = True
		return self.stopped

	def snapshot(self, sitemap_url: Optional[str] = None) -> "CrawlResult":
		return CrawlResult(
			urls=self.urls.values(),
			status=self.status,
			errors=self.errors,
			sitemap_url=sitemap_url,
		)


class CrawlResult:
	def __init__(
		self,
		urls: Iterable[UrlEntry] = (),
		status: Iterable[str] = (),
		errors: Iterable[str] = (),
		sitemap_url: Optional[str] = None,
	) -> None:
		self.urls: Tuple[UrlEntry, ...] = tuple(urls)
		self.status: Tuple[str, ...] = tuple(status)
		self.errors: Tuple[str, ...] = tuple(errors)
		self.sitemap_url = sitemap_url

	def sources(self) -> Dict[str, str]:
		return {e.url: e.source for e in self.urls}

	def to_dict(self) -> Dict[str, Any]:
		data: Dict[str, Any] = {
			"urls": [e.to_dict() for e in self.urls],
			"status": list(self.status),
			"errors": list(self.errors),
		}
		if self.sitemap_url is not None:
			data["sitemapUrl"] = self.sitemap_url
		return data

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "CrawlResult":
		urls = []
		for item in data.get("urls") or []:
			url = item.get("url")
			if url:
				urls.append(UrlEntry(url, item.get("source", "")))
		return cls(
			urls=urls,
			status=data.get("status") or [],
			errors=data.get("errors") or [],
			sitemap_url=data.get("sitemapUrl"),
		)

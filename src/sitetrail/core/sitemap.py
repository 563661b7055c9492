# SiteTrail — Sitemap resolution (index recursion, leaf collection)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import gzip
import logging
from typing import List, Optional
from urllib.parse import urljoin
import xml.etree.ElementTree as ET

from .result import CrawlState
from .session import Pacer
from ..utils.urls import join_source_path, normalize_url, sitemap_filename


logger = logging.getLogger(__name__)

GZIP_MAGIC = b"\x1f\x8b"
NESTED_ENTRY_TAGS = ("url", "sitemap")


def local_name(tag) -> str:
	"""Tag or attribute name without its {namespace} prefix."""
	if not isinstance(tag, str):
		return ""
	return tag.rsplit("}", 1)[-1]


def children_named(element: ET.Element, name: str) -> List[ET.Element]:
	return [c for c in element if local_name(c.tag) == name]


def _loc_child_text(element: ET.Element) -> Optional[str]:
	for child in children_named(element, "loc"):
		text = (child.text or "").strip()
		if text:
			return text
	return None


def extract_loc(entry: ET.Element) -> Optional[str]:
	"""Pull the location out of a <url> or <sitemap> entry.

	Tried in order: a <loc> child, a loc attribute, a <loc> nested one level
	deeper under <url>/<sitemap>, and finally the entry's own text.
	"""
	text = _loc_child_text(entry)
	if text:
		return text
	for key, value in entry.attrib.items():
		if local_name(key) == "loc" and (value or "").strip():
			return value.strip()
	for child in entry:
		if local_name(child.tag) in NESTED_ENTRY_TAGS:
			text = _loc_child_text(child)
			if text:
				return text
	text = (entry.text or "").strip()
	return text or None


def describe_entry(entry: ET.Element, limit: int = 100) -> str:
	try:
		return ET.tostring(entry, encoding="unicode").strip()[:limit]
	except (TypeError, ValueError):
		return repr(entry)[:limit]


def parse_sitemap_xml(content: bytes, url: str = "") -> ET.Element:
	if url.lower().endswith(".gz") or content[:2] == GZIP_MAGIC:
		try:
			content = gzip.decompress(content)
		except (OSError, EOFError):
			logger.warning("Sitemap %s looks gzipped but is not; parsing as plain XML", url)
	return ET.fromstring(content)


class SitemapResolver:
	"""Fetches sitemap documents and expands indexes depth-first into the crawl state."""

	def __init__(self, session, pacer: Optional[Pacer] = None, timeout: float = 10.0) -> None:
		self.session = session
		self.pacer = pacer or Pacer()
		self.timeout = timeout

	def fetch(self, url: str) -> ET.Element:
		r = self.session.get(url, timeout=self.timeout)
		r.raise_for_status()
		return parse_sitemap_xml(r.content, url)

	def resolve(self, url: str, source_path: str, state: CrawlState, delay: float = 0.0) -> None:
		if state.should_stop():
			return
		key = normalize_url(url) or url
		if key in state.visited_sitemaps:
			state.log_status(f"Skipping already processed sitemap: {url}")
			return
		state.visited_sitemaps.add(key)

		filename = sitemap_filename(url)
		try:
			self.pacer.wait(delay, state.should_stop)
			if state.should_stop():
				return
			state.log_status(f"Fetching: {filename}")
			logger.debug("Fetching sitemap %s (%s)", filename, url)
			root = self.fetch(url)
		except Exception as e:
			state.log_error(f"Error processing {url}: {str(e) or type(e).__name__}")
			return

		kind = local_name(root.tag)
		if kind == "sitemapindex" and children_named(root, "sitemap"):
			self._expand_index(url, root, source_path, state, delay)
		elif kind == "urlset" and children_named(root, "url"):
			self._collect_urls(url, root, source_path, state)
		else:
			state.log_error(f"Unknown sitemap format in {url}. Expected sitemapindex or urlset.")
			state.log_status(f"Debug: root element: {kind or root.tag}")

	def _expand_index(self, url: str, root: ET.Element, source_path: str, state: CrawlState, delay: float) -> None:
		filename = sitemap_filename(url)
		entries = children_named(root, "sitemap")
		state.log_status(f"Found {len(entries)} nested sitemaps in {filename}")
		for i, entry in enumerate(entries, 1):
			if state.should_stop():
				return
			loc = extract_loc(entry)
			if not loc:
				state.log_warning(f"Warning: Failed to extract sitemap location from entry: {describe_entry(entry)}")
				continue
			try:
				child = urljoin(url, loc)
			except ValueError:
				state.log_warning(f"Warning: Invalid sitemap location {loc!r} in {filename}")
				continue
			logger.debug("Processing nested sitemap %d/%d: %s", i, len(entries), child)
			self.resolve(child, join_source_path(source_path, sitemap_filename(child)), state, delay)

	def _collect_urls(self, url: str, root: ET.Element, source_path: str, state: CrawlState) -> None:
		filename = sitemap_filename(url)
		entries = children_named(root, "url")
		label = (source_path or "").strip() or filename
		state.log_status(f"Found {len(entries)} URLs in {filename}")
		state.log_status(f'Processing URLs with source path: "{label}"')

		extracted = 0
		added = 0
		for entry in entries:
			loc = extract_loc(entry)
			page = normalize_url(loc) if loc else None
			if not page:
				state.log_warning(f"Warning: Failed to extract URL from entry: {describe_entry(entry)}")
				continue
			extracted += 1
			if state.add_url(page, label):
				added += 1

		logger.info("Added %d new URLs from %d entries in %s", added, len(entries), filename)
		if entries and extracted == 0:
			state.log_warning(
				f"Warning: Found {len(entries)} URL entries but extracted 0 URLs. "
				f"First entry structure: {describe_entry(entries[0], limit=200)}"
			)

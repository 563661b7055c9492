# SiteTrail — HTML parsing and same-origin link extraction
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

from typing import List, Union
from bs4 import BeautifulSoup, FeatureNotFound

from ..utils.urls import normalize_url, same_origin


PARSER_CANDIDATES = ["lxml", "html.parser"]


def parse_html(content: Union[bytes, str]) -> BeautifulSoup:
	"""Parse HTML using lxml if available, else builtin parser."""
	for parser in PARSER_CANDIDATES:
		try:
			return BeautifulSoup(content, parser)
		except FeatureNotFound:
			continue
	return BeautifulSoup(content, "html.parser")


def extract_links(html: Union[bytes, str, BeautifulSoup], page_url: str, origin: str) -> List[str]:
	"""Return the deduplicated same-origin links of a page, in document order.

	Each href is resolved against page_url and normalized; hrefs that do not
	normalize or that leave the origin are dropped.
	"""
	soup = html if isinstance(html, BeautifulSoup) else parse_html(html)
	links = {}
	for a in soup.find_all("a", href=True):
		href = a.get("href")
		if not href:
			continue
		link = normalize_url(href, page_url)
		if link and same_origin(link, origin):
			links.setdefault(link, None)
	return list(links)

# SiteTrail — robots.txt sitemap discovery
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import logging
import re
from typing import List
from urllib.parse import urlsplit
import requests


logger = logging.getLogger(__name__)

SITEMAP_LINE = re.compile(r"^sitemap:\s*(.*)$", re.IGNORECASE)
CONTENT_EXCERPT = 5000


class RobotsFetchError(Exception):
	"""robots.txt could not be fetched."""


class RobotsSitemaps:
	def __init__(self, robots_url: str, sitemaps: List[str], robots_content: str) -> None:
		self.robots_url = robots_url
		self.sitemaps = sitemaps
		self.robots_content = robots_content


def robots_url_for(url: str) -> str:
	"""robots.txt location for a site URL; a URL already ending in robots.txt is kept."""
	p = urlsplit(url)
	if p.path.endswith("/robots.txt"):
		return url
	return f"{p.scheme}://{p.netloc}/robots.txt"


def parse_sitemap_lines(text: str) -> List[str]:
	sitemaps: List[str] = []
	for line in text.splitlines():
		m = SITEMAP_LINE.match(line.strip())
		if m and m.group(1).strip():
			sitemaps.append(m.group(1).strip())
	return sitemaps


def discover_sitemaps(session, robots_url: str, timeout: float = 10.0) -> RobotsSitemaps:
	"""Fetch robots.txt and list its Sitemap: entries.

	Raises RobotsFetchError with a readable reason on any fetch failure.
	"""
	try:
		r = session.get(robots_url, timeout=timeout)
		r.raise_for_status()
	except requests.HTTPError as e:
		resp = e.response
		if resp is not None:
			raise RobotsFetchError(f"HTTP {resp.status_code}: {resp.reason}") from e
		raise RobotsFetchError(str(e)) from e
	except (requests.ConnectionError, requests.Timeout) as e:
		raise RobotsFetchError("No response from server. Check if the URL is correct.") from e
	except requests.RequestException as e:
		raise RobotsFetchError(str(e) or "Failed to fetch robots.txt") from e
	text = r.text or ""
	logger.info("Received %d bytes from %s", len(text), robots_url)
	sitemaps = parse_sitemap_lines(text)
	logger.info("Found %d sitemap(s) in %s", len(sitemaps), robots_url)
	return RobotsSitemaps(robots_url, sitemaps, text[:CONTENT_EXCERPT])

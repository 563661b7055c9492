import pytest
import requests
from sitetrail.core.robots import RobotsFetchError, discover_sitemaps, parse_sitemap_lines, robots_url_for

from mocks import MockSession


ROBOTS = """User-agent: *
Disallow: /private
Sitemap: https://example.com/sitemap_index.xml
  sitemap:https://example.com/news.xml
SITEMAP:
# Sitemap: https://example.com/commented.xml
"""


def test_parse_sitemap_lines():
	assert parse_sitemap_lines(ROBOTS) == [
		"https://example.com/sitemap_index.xml",
		"https://example.com/news.xml",
	]


def test_robots_url_for():
	assert robots_url_for("https://example.com/some/page?x=1") == "https://example.com/robots.txt"
	assert robots_url_for("https://example.com/robots.txt") == "https://example.com/robots.txt"


def test_discover_sitemaps():
	url = "https://example.com/robots.txt"
	found = discover_sitemaps(MockSession({url: (ROBOTS, "text/plain")}), url)
	assert found.sitemaps == ["https://example.com/sitemap_index.xml", "https://example.com/news.xml"]
	assert found.robots_content.startswith("User-agent")


def test_discover_sitemaps_http_error():
	with pytest.raises(RobotsFetchError, match="HTTP 404: Not Found"):
		discover_sitemaps(MockSession({}), "https://example.com/robots.txt")


def test_discover_sitemaps_no_response():
	url = "https://example.com/robots.txt"
	with pytest.raises(RobotsFetchError, match="No response from server"):
		discover_sitemaps(MockSession({url: requests.ConnectionError("refused")}), url)

import pytest
import requests
from sitetrail.core.crawl import Crawler, CrawlOptions, InvalidSitemapUrl

from mocks import MockSession, RecordingPacer, page, sitemapindex, urlset


ROOT = "https://x.com/root.xml"
A = "https://x.com/a.xml"
B = "https://x.com/b.xml"


def make_crawler(mapping):
	session = MockSession(mapping)
	pacer = RecordingPacer()
	return Crawler(user_agent="test", session=session, pacer=pacer), session, pacer


@pytest.mark.parametrize("bad", ["", "   ", "not-a-url", "ftp://x.com/sitemap.xml", "/sitemap.xml", None])
def test_invalid_entry_url_rejected_before_fetching(bad):
	crawler, session, _ = make_crawler({})
	with pytest.raises(InvalidSitemapUrl):
		crawler.crawl(bad, CrawlOptions(delay_ms=0))
	assert session.calls == []


def test_sitemap_only_crawl():
	mapping = {
		ROOT: sitemapindex(A, B),
		A: urlset("https://x.com/1"),
		B: requests.Timeout("timed out"),
	}
	crawler, session, _ = make_crawler(mapping)
	res = crawler.crawl(ROOT, CrawlOptions(delay_ms=0))
	assert res.sources() == {"https://x.com/1": "root.xml=>a.xml"}
	assert len(res.errors) == 1
	assert res.sitemap_url == ROOT
	assert session.calls == [ROOT, A, B]
	assert res.status[0] == "Starting crawl from: root.xml"
	assert "HTML link crawling is disabled" in res.status
	assert res.status[-1] == "Crawl completed. Total unique URLs found: 1"


def test_entry_leaf_uses_entry_filename():
	sm = "https://x.com/sitemap.xml"
	crawler, _, _ = make_crawler({sm: urlset("https://x.com/a", "https://x.com/b")})
	res = crawler.crawl(sm, CrawlOptions(delay_ms=0))
	assert set(res.sources().values()) == {"sitemap.xml"}


def test_html_phase_accumulates_into_same_map():
	mapping = {
		ROOT: sitemapindex(A),
		A: urlset("https://x.com/1", "https://x.com/2"),
		"https://x.com/1": page("/2", "/3", "https://elsewhere.com/x"),
		"https://x.com/2": page("/1"),
		"https://x.com/3": page("/4"),
		"https://x.com/4": page(),
	}
	crawler, session, _ = make_crawler(mapping)
	res = crawler.crawl(ROOT, CrawlOptions(delay_ms=0, crawl_html_links=True))
	assert res.sources() == {
		"https://x.com/1": "root.xml=>a.xml",
		"https://x.com/2": "root.xml=>a.xml",
		"https://x.com/3": "HTML_CRAWL:depth_1",
		"https://x.com/4": "HTML_CRAWL:depth_2",
	}
	assert [e.url for e in res.urls] == ["https://x.com/1", "https://x.com/2", "https://x.com/3", "https://x.com/4"]
	html_calls = session.calls[2:]
	assert len(html_calls) == len(set(html_calls)) == 4
	assert "https://elsewhere.com/x" not in session.calls
	assert "Base domain: https://x.com" in res.status
	assert res.errors == ()


def test_depth_limit_from_options():
	mapping = {
		ROOT: urlset("https://x.com/1"),
		"https://x.com/1": page("/2"),
		"https://x.com/2": page("/3"),
		"https://x.com/3": page(),
	}
	crawler, _, _ = make_crawler(mapping)
	res = crawler.crawl(ROOT, CrawlOptions(delay_ms=0, crawl_html_links=True, max_depth=2))
	assert "https://x.com/2" in res.sources()
	assert "https://x.com/3" not in res.sources()


def test_delay_is_converted_to_seconds():
	crawler, _, pacer = make_crawler({ROOT: urlset("https://x.com/1")})
	crawler.crawl(ROOT, CrawlOptions(delay_ms=250))
	assert pacer.delays == [0.25]


def test_stop_flag_ends_crawl_early():
	mapping = {
		ROOT: sitemapindex(A, B),
		A: urlset("https://x.com/1"),
		B: urlset("https://x.com/2"),
	}
	crawler, session, _ = make_crawler(mapping)
	res = crawler.crawl(ROOT, CrawlOptions(delay_ms=0, crawl_html_links=True), stop_flag=lambda: len(session.calls) >= 2)
	assert session.calls == [ROOT, A]
	assert res.sources() == {"https://x.com/1": "root.xml=>a.xml"}
	assert "Crawl stopped by caller" in res.status


def test_result_dict_shape():
	crawler, _, _ = make_crawler({ROOT: urlset("https://x.com/1")})
	data = crawler.crawl(ROOT, CrawlOptions(delay_ms=0)).to_dict()
	assert data["urls"] == [{"url": "https://x.com/1", "source": "root.xml"}]
	assert data["sitemapUrl"] == ROOT
	assert data["errors"] == []
	assert isinstance(data["status"], list)


def test_bad_index_entry_does_not_abort_crawl():
	crawler, _, _ = make_crawler({ROOT: sitemapindex("http://[::1", A), A: urlset("https://x.com/1")})
	res = crawler.crawl(ROOT, CrawlOptions(delay_ms=0))
	assert res.sources() == {"https://x.com/1": "root.xml=>a.xml"}
	assert res.errors == ()

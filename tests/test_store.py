import json

import pytest
from sitetrail.core.result import CrawlResult, UrlEntry
from sitetrail.storage.store import ResultStore, StoreError

from mocks import FakeRedis


def sample_result():
	return CrawlResult(
		urls=[UrlEntry("https://x.com/1", "root.xml=>a.xml")],
		status=["Crawl completed. Total unique URLs found: 1"],
		errors=[],
	)


def test_save_and_load_by_filename():
	fake = FakeRedis()
	store = ResultStore(lambda: fake)
	key = store.save("https://x.com/sitemaps/root.xml", sample_result())
	assert key == "root.xml"
	assert json.loads(fake.data["root.xml"])["sitemapUrl"] == "https://x.com/sitemaps/root.xml"
	assert store.exists("root.xml")
	loaded = store.load("root.xml")
	assert loaded.urls == (UrlEntry("https://x.com/1", "root.xml=>a.xml"),)
	assert loaded.sitemap_url == "https://x.com/sitemaps/root.xml"
	assert store.load("missing.xml") is None


def test_keys_sorted_and_clear():
	fake = FakeRedis()
	store = ResultStore(lambda: fake)
	for name in ("b.xml", "a.xml"):
		store.save(f"https://x.com/{name}", sample_result())
	assert store.keys() == ["a.xml", "b.xml"]
	assert store.clear() == 2
	assert store.keys() == []
	assert store.clear() == 0


def test_memory_report():
	store = ResultStore(lambda: FakeRedis(maxmemory=8 * 1024 * 1024))
	info = store.memory()
	assert info.used_mb == 2
	assert info.available_mb == 6
	assert info.has_limit
	assert not ResultStore(lambda: FakeRedis()).memory().has_limit


def test_client_is_lazy_and_reconnects_after_failure():
	clients = [FakeRedis(fail_ping=True), FakeRedis()]
	made = []

	def factory():
		made.append(clients[len(made)])
		return made[-1]

	store = ResultStore(factory)
	assert made == []
	with pytest.raises(StoreError):
		store.keys()
	assert store.keys() == []
	assert store.keys() == []
	assert len(made) == 2


def test_corrupt_value_raises_store_error():
	fake = FakeRedis()
	fake.data["bad.xml"] = "not json"
	with pytest.raises(StoreError):
		ResultStore(lambda: fake).load("bad.xml")

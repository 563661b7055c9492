# SiteTrail — Crawl result store (Redis, one JSON blob per sitemap)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import json
import logging
import threading
from typing import Any, Callable, Dict, List, Optional

from redis import Redis
from redis.exceptions import RedisError

from ..core.result import CrawlResult
from ..utils.urls import sitemap_filename


logger = logging.getLogger(__name__)

MB = 1024 * 1024


class StoreError(Exception):
	"""The backing store failed or could not be reached."""


class MemoryInfo:
	def __init__(self, used_bytes: int, max_bytes: int) -> None:
		self.used_mb = used_bytes / MB
		self.max_mb = max_bytes / MB
		self.available_mb = self.max_mb - self.used_mb
		# maxmemory 0 means no limit (typical for a local Redis)
		self.has_limit = max_bytes > 0

	def to_dict(self) -> Dict[str, Any]:
		return {
			"usedMB": self.used_mb,
			"maxMB": self.max_mb,
			"availableMB": self.available_mb,
			"hasLimit": self.has_limit,
		}


def make_redis_client(settings) -> Redis:
	"""Build a Redis client from settings: redis_url (redis:// or rediss://) wins over host/port."""
	if settings.redis_url:
		logger.info("Redis: using redis_url for connection")
		return Redis.from_url(settings.redis_url, decode_responses=True, socket_timeout=10)
	logger.info("Redis: using host/port %s:%s", settings.redis_host, settings.redis_port)
	return Redis(host=settings.redis_host, port=settings.redis_port, decode_responses=True, socket_timeout=10)


class ResultStore:
	"""Saves and loads crawl results keyed by sitemap filename.

	The client is created on first use; a failed connection drops it so the
	next call builds a fresh one.
	"""

	def __init__(self, client_factory: Callable[[], Any]) -> None:
		self._factory = client_factory
		self._client = None
		self._lock = threading.Lock()

	def _connect(self):
		with self._lock:
			if self._client is None:
				client = self._factory()
				try:
					client.ping()
				except RedisError as e:
					logger.error("Failed to connect to Redis: %s", e)
					raise StoreError(f"Failed to connect to Redis: {e}") from e
				logger.info("Redis client connected")
				self._client = client
			return self._client

	def _call(self, action: str, fn):
		client = self._connect()
		try:
			return fn(client)
		except RedisError as e:
			logger.error("Redis %s failed: %s", action, e)
			with self._lock:
				if self._client is client:
					self._client = None
			raise StoreError(f"Failed to {action}: {e}") from e

	@staticmethod
	def key_for(sitemap_url: str) -> str:
		return sitemap_filename(sitemap_url)

	def save(self, sitemap_url: str, result: CrawlResult) -> str:
		key = self.key_for(sitemap_url)
		data = result.to_dict()
		data["sitemapUrl"] = sitemap_url
		self._call("save results", lambda c: c.set(key, json.dumps(data, ensure_ascii=False)))
		logger.info("Saved %d URLs under key %s", len(result.urls), key)
		return key

	def load(self, key: str) -> Optional[CrawlResult]:
		raw = self._call("load results", lambda c: c.get(key))
		if not raw:
			return None
		try:
			return CrawlResult.from_dict(json.loads(raw))
		except (ValueError, TypeError, AttributeError) as e:
			raise StoreError(f"Stored value for {key} is not a crawl result: {e}") from e

	def exists(self, key: str) -> bool:
		return bool(self._call("check key", lambda c: c.exists(key)))

	def keys(self) -> List[str]:
		return sorted(self._call("fetch keys", lambda c: c.keys("*")))

	def clear(self) -> int:
		keys = self._call("fetch keys", lambda c: c.keys("*"))
		if not keys:
			return 0
		logger.info("Deleting %d keys from Redis", len(keys))
		self._call("clear keys", lambda c: c.delete(*keys))
		return len(keys)

	def memory(self) -> MemoryInfo:
		info = self._call("fetch memory info", lambda c: c.info("memory"))
		return MemoryInfo(int(info.get("used_memory", 0) or 0), int(info.get("maxmemory", 0) or 0))

# SiteTrail — URL utilities: normalization, origins, sitemap filenames
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

from typing import Optional
from urllib.parse import urljoin, urlsplit, urlunsplit


SOURCE_DELIMITER = "=>"
DEFAULT_SITEMAP_NAME = "sitemap.xml"
DEFAULT_PORTS = {"http": 80, "https": 443}


def normalize_url(raw: str, base: Optional[str] = None) -> Optional[str]:
	"""Canonicalize a URL: resolve against base, drop fragment and trailing slashes.

	Lowercases scheme and host and removes default ports. Returns None for anything
	that does not resolve to an absolute URL with a host.
	"""
	try:
		raw = (raw or "").strip()
		url = urljoin(base, raw) if base else raw
		p = urlsplit(url)
		if not p.scheme or not p.hostname:
			return None
		scheme = p.scheme.lower()
		host = p.hostname
		if ":" in host:
			host = f"[{host}]"
		netloc = host
		port = p.port
		if port is not None and DEFAULT_PORTS.get(scheme) != port:
			netloc = f"{netloc}:{port}"
		if p.username is not None:
			userinfo = p.username if p.password is None else f"{p.username}:{p.password}"
			netloc = f"{userinfo}@{netloc}"
		path = p.path.rstrip("/") or "/"
		return urlunsplit((scheme, netloc, path, p.query, ""))
	except (ValueError, TypeError, AttributeError):
		return None


def url_origin(url: str) -> Optional[str]:
	"""Return scheme://host[:port] for an absolute URL, None otherwise."""
	try:
		p = urlsplit(url)
		if not p.scheme or not p.hostname:
			return None
		scheme = p.scheme.lower()
		host = p.hostname
		if ":" in host:
			host = f"[{host}]"
		port = p.port
		if port is not None and DEFAULT_PORTS.get(scheme) != port:
			return f"{scheme}://{host}:{port}"
		return f"{scheme}://{host}"
	except (ValueError, TypeError, AttributeError):
		return None


def same_origin(url: str, origin: str) -> bool:
	o = url_origin(url)
	return o is not None and o == origin


def is_absolute_http_url(url: str) -> bool:
	try:
		p = urlsplit(url)
		p.port  # raises ValueError on a malformed port
		return p.scheme.lower() in ("http", "https") and bool(p.hostname)
	except (ValueError, TypeError, AttributeError):
		return False


def sitemap_filename(url: str) -> str:
	"""Last path segment of a sitemap URL, 'sitemap.xml' when empty or unparseable."""
	try:
		p = urlsplit(url)
		if not p.scheme or not p.netloc:
			return DEFAULT_SITEMAP_NAME
		return p.path.split("/")[-1] or DEFAULT_SITEMAP_NAME
	except (ValueError, TypeError, AttributeError):
		return DEFAULT_SITEMAP_NAME


def join_source_path(parent: str, child: str) -> str:
	parent = (parent or "").strip()
	if not parent:
		return child
	return f"{parent}{SOURCE_DELIMITER}{child}"


__all__ = [
	"normalize_url",
	"url_origin",
	"same_origin",
	"is_absolute_http_url",
	"sitemap_filename",
	"join_source_path",
	"SOURCE_DELIMITER",
]

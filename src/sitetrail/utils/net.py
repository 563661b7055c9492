# SiteTrail — Networking utilities (requests session with redirect and retry policy)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry


HTML_ACCEPT = "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8"


def build_session(user_agent: str, retries: int = 0, backoff: float = 0.5, max_redirects: int = 5) -> requests.Session:
	"""Build a requests Session with the crawler's headers, redirect cap and Retry.

	retries=0 means a failed fetch is reported once and never retried.
	"""
	s = requests.Session()
	s.headers.update(
		{
			"User-Agent": user_agent,
			"Accept": HTML_ACCEPT,
		}
	)
	s.max_redirects = max_redirects
	retry = Retry(
		total=retries,
		backoff_factor=backoff,
		status_forcelist=(429, 500, 502, 503, 504),
		allowed_methods=frozenset({"GET", "HEAD"}),
		raise_on_status=False,
	)
	adapter = HTTPAdapter(max_retries=retry)
	s.mount("http://", adapter)
	s.mount("https://", adapter)
	return s


def content_type(response) -> str:
	try:
		return response.headers.get("Content-Type", "") or ""
	except AttributeError:
		return ""

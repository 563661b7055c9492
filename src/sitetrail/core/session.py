# SiteTrail — HTTP session and politeness helpers
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import time
from typing import Optional
import requests
from ..utils.net import build_session


class Pacer:
	"""Fixed politeness delay taken before every fetch.

	The sleep is sliced so a caller's stop flag can cut it short.
	"""

	def __init__(self, sleep=time.sleep, slice_seconds: float = 0.05) -> None:
		self._sleep = sleep
		self._slice = slice_seconds

	def wait(self, delay: float, stop_flag: Optional[callable] = None) -> None:
		if delay <= 0:
			return
		end = time.monotonic() + delay
		while True:
			if stop_flag and stop_flag():
				return
			remaining = end - time.monotonic()
			if remaining <= 0:
				return
			self._sleep(min(self._slice, remaining))


def make_session(user_agent: str, retries: int = 0, backoff: float = 0.5, max_redirects: int = 5) -> requests.Session:
	return build_session(user_agent=user_agent, retries=retries, backoff=backoff, max_redirects=max_redirects)

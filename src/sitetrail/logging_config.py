# SiteTrail — Logging configuration (rotating file + stdout)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import logging
import logging.handlers
import os


def configure_logging(level: str = "INFO", log_dir: str = "logs") -> None:
	"""Configure root logger with a rotating file handler and stdout.

	One line per record: time, level, logger and message, tab separated.
	An empty log_dir disables the file handler.
	"""
	fmt = (
		"%(asctime)s\t%(levelname)s\t%(name)s\t%(message)s"
	)

	root = logging.getLogger()
	root.setLevel(getattr(logging, level.upper(), logging.INFO))

	# Clear existing handlers in case of re-init
	for h in list(root.handlers):
		root.removeHandler(h)

	stream = logging.StreamHandler()
	stream.setFormatter(logging.Formatter(fmt))
	root.addHandler(stream)

	if not log_dir:
		return
	os.makedirs(log_dir, exist_ok=True)
	file_handler = logging.handlers.RotatingFileHandler(
		os.path.join(log_dir, "sitetrail.log"), maxBytes=2 * 1024 * 1024, backupCount=3, encoding="utf-8"
	)
	file_handler.setFormatter(logging.Formatter(fmt))
	root.addHandler(file_handler)

	# per-request chatter from urllib3 drowns the crawl log
	logging.getLogger("urllib3").setLevel(logging.WARNING)

# SiteTrail — IO helpers (directories, JSON export)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import json
import os
from typing import Any


def ensure_dirs(*paths: str) -> None:
	for p in paths:
		if p:
			os.makedirs(p, exist_ok=True)


def write_json(path: str, obj: Any) -> str:
	ensure_dirs(os.path.dirname(path))
	with open(path, "w", encoding="utf-8") as f:
		json.dump(obj, f, indent=2, ensure_ascii=False)
	return path

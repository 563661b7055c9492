# SiteTrail — Configuration via Pydantic BaseSettings
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

from typing import Optional
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field


class Settings(BaseSettings):
	"""Application settings with sane defaults.

	Environment variables are prefixed with SITETRAIL_. CLI flags can override.
	"""

	model_config = SettingsConfigDict(env_prefix="SITETRAIL_", env_file=".env", extra="ignore")

	user_agent: str = Field(default="Mozilla/5.0 (compatible; SitemapCrawler/1.0)")
	delay_ms: int = Field(default=500, ge=0)
	crawl_html_links: bool = Field(default=False)
	max_depth: int = Field(default=10, ge=0)
	timeout: float = Field(default=10.0, gt=0)
	max_redirects: int = Field(default=5, ge=0)
	retries: int = Field(default=0, ge=0)
	backoff: float = Field(default=0.5)
	log_level: str = Field(default="INFO")
	log_dir: str = Field(default="logs")
	redis_url: Optional[str] = Field(default=None)
	redis_host: str = Field(default="localhost")
	redis_port: int = Field(default=6379)

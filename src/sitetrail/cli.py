# SiteTrail — CLI (Typer)
# Author: Sachin Chhetri
# Year: 2025
# License: MIT

import typer
from typing import Optional
from rich import print
from rich.console import Console
from rich.table import Table

from .config import Settings
from .core.crawl import Crawler, CrawlOptions, InvalidSitemapUrl
from .core.robots import RobotsFetchError, discover_sitemaps, robots_url_for
from .core.session import make_session
from .logging_config import configure_logging
from .storage.store import ResultStore, StoreError, make_redis_client
from .utils.io import write_json

app = typer.Typer(add_completion=False, no_args_is_help=True)
console = Console()

CLIENT_ERROR = 2
SERVER_ERROR = 1


def _store(cfg: Settings) -> ResultStore:
	return ResultStore(lambda: make_redis_client(cfg))


def _fail(message: str, code: int = SERVER_ERROR) -> None:
	print(f"[bold red]{message}[/bold red]")
	raise typer.Exit(code=code)


def _urls_table(result, limit: int) -> Table:
	table = Table(title=f"{len(result.urls)} URLs")
	table.add_column("URL", overflow="fold")
	table.add_column("Source", overflow="fold")
	for entry in result.urls[:limit]:
		table.add_row(entry.url, entry.source)
	return table


@app.command()
def crawl(
	sitemap_url: str = typer.Argument(..., help="Entry sitemap (or sitemap index) URL"),
	delay: Optional[int] = typer.Option(None, help="Delay before each request in milliseconds"),
	html_links: Optional[bool] = typer.Option(None, "--html-links/--no-html-links", help="Follow same-origin links from sitemap pages"),
	max_depth: Optional[int] = typer.Option(None, help="Link-following depth limit"),
	output: Optional[str] = typer.Option(None, help="Write the crawl result as JSON to this path"),
	save: bool = typer.Option(False, help="Store the result in Redis under the sitemap filename"),
	show: int = typer.Option(20, help="Number of URLs to print"),
	user_agent: Optional[str] = typer.Option(None, help="Override User-Agent"),
	log_level: Optional[str] = typer.Option(None, help="Log level"),
):
	"""Crawl a sitemap hierarchy and report every URL with its source path."""
	cfg = Settings()
	configure_logging(level=log_level or cfg.log_level, log_dir=cfg.log_dir)
	crawler = Crawler(
		user_agent=user_agent or cfg.user_agent,
		timeout=cfg.timeout,
		max_redirects=cfg.max_redirects,
		retries=cfg.retries,
		backoff=cfg.backoff,
	)
	opt = CrawlOptions(
		delay_ms=delay if delay is not None else cfg.delay_ms,
		crawl_html_links=html_links if html_links is not None else cfg.crawl_html_links,
		max_depth=max_depth if max_depth is not None else cfg.max_depth,
	)
	print(f"[bold]Crawling:[/bold] {sitemap_url}")
	try:
		res = crawler.crawl(sitemap_url, opt)
	except InvalidSitemapUrl as e:
		_fail(str(e), CLIENT_ERROR)
	if show > 0 and res.urls:
		console.print(_urls_table(res, show))
	print({
		"urls": len(res.urls),
		"errors": len(res.errors),
		"html_links": opt.crawl_html_links,
	})
	for err in res.errors:
		print(f"[red]{err}[/red]")
	if output:
		print(f"Wrote {write_json(output, res.to_dict())}")
	if save:
		store = _store(cfg)
		try:
			replacing = store.exists(store.key_for(res.sitemap_url))
			key = store.save(res.sitemap_url, res)
		except StoreError as e:
			_fail(str(e))
		if replacing:
			print(f"[yellow]Replaced existing result for key {key}[/yellow]")
		print(f"Saved under key [bold]{key}[/bold]")


@app.command()
def robots(
	url: str = typer.Argument(..., help="Site URL or robots.txt URL"),
	show_content: bool = typer.Option(False, help="Also print the start of robots.txt"),
):
	"""List the sitemaps declared in a site's robots.txt."""
	cfg = Settings()
	configure_logging(level=cfg.log_level, log_dir=cfg.log_dir)
	session = make_session(user_agent=cfg.user_agent, retries=cfg.retries, backoff=cfg.backoff, max_redirects=cfg.max_redirects)
	try:
		found = discover_sitemaps(session, robots_url_for(url), timeout=cfg.timeout)
	except RobotsFetchError as e:
		_fail(str(e))
	if show_content:
		console.print(found.robots_content, markup=False, highlight=False)
	if not found.sitemaps:
		print(f"No sitemaps declared in {found.robots_url}")
		return
	for sm in found.sitemaps:
		print(sm)


@app.command()
def load(key: str = typer.Argument(..., help="Stored key (sitemap filename)"), show: int = typer.Option(20)):
	"""Print a stored crawl result."""
	cfg = Settings()
	try:
		res = _store(cfg).load(key)
	except StoreError as e:
		_fail(str(e))
	if res is None:
		_fail(f"Key not found: {key}", CLIENT_ERROR)
	print(f"[bold]{res.sitemap_url or key}[/bold]")
	console.print(_urls_table(res, show))
	print({"urls": len(res.urls), "errors": len(res.errors)})


@app.command()
def keys():
	"""List stored keys."""
	cfg = Settings()
	try:
		names = _store(cfg).keys()
	except StoreError as e:
		_fail(str(e))
	for name in names:
		print(name)


@app.command()
def clear(yes: bool = typer.Option(False, "--yes", help="Skip confirmation")):
	"""Delete every stored key."""
	if not yes:
		typer.confirm("Delete all stored crawl results?", abort=True)
	cfg = Settings()
	store = _store(cfg)
	try:
		deleted = store.clear()
	except StoreError as e:
		_fail(str(e))
	if deleted == 0:
		print("No keys to delete")
		return
	print(f"Successfully deleted {deleted} keys")


@app.command()
def memory():
	"""Show Redis memory usage."""
	cfg = Settings()
	try:
		info = _store(cfg).memory()
	except StoreError as e:
		_fail(str(e))
	print(info.to_dict())


@app.command("print-config")
def print_config():
	"""Print effective configuration from environment."""
	cfg = Settings()
	print(cfg.model_dump())


def main():
	app()


if __name__ == "__main__":
	main()

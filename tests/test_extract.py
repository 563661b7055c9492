from sitetrail.core.extract import extract_links, parse_html


def test_extract_same_origin_links():
	html = b"""
	<html><body>
	<a href="/about/">About</a>
	<a href="contact#form">Contact</a>
	<a href="https://x.com/about">About again</a>
	<a href="https://other.com/page">Elsewhere</a>
	<a href="http://x.com/insecure">Other scheme</a>
	<a href="mailto:hi@x.com">Mail</a>
	<a href="javascript:void(0)">JS</a>
	<a>No href</a>
	</body></html>
	"""
	links = extract_links(html, "https://x.com/docs/index.html", "https://x.com")
	assert links == ["https://x.com/about", "https://x.com/docs/contact"]


def test_extract_accepts_parsed_soup():
	soup = parse_html('<a href="/a"></a><a href="/a/#x"></a><a href="/b"></a>')
	assert extract_links(soup, "https://x.com/", "https://x.com") == ["https://x.com/a", "https://x.com/b"]


def test_extract_no_links():
	assert extract_links("<html><body><p>plain</p></body></html>", "https://x.com/", "https://x.com") == []

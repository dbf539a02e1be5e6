"""HTML to plain text conversion and link discovery for crawled pages."""

from urllib.parse import urldefrag, urljoin, urlparse

from bs4 import BeautifulSoup

# removed with their content before the remaining tags are stripped
STRIPPED_ELEMENTS = ("script", "style", "nav", "header", "footer")


def normalize_whitespace(text: str) -> str:
    return " ".join(text.split())


def extract_links(soup: BeautifulSoup, page_url: str) -> list[str]:
    """Return absolute http(s) links of a page without fragments, in document order, deduplicated."""
    links: list[str] = []
    seen: set[str] = set()
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"].strip()
        if not href or href.startswith(("mailto:", "javascript:", "tel:")):
            continue
        link, _ = urldefrag(urljoin(page_url, href))
        if urlparse(link).scheme not in ("http", "https") or link in seen:
            continue
        seen.add(link)
        links.append(link)
    return links


def parse_page(html: str, page_url: str) -> tuple[str | None, str, list[str]]:
    """Clean a crawled page.

    Links are collected before any element is removed, so navigation menus
    still drive the crawl even though their text is not indexed.

    Args:
        html (str): Raw page markup.
        page_url (str): URL the page was fetched from, used to resolve relative links.

    Returns:
        tuple[str | None, str, list[str]]: (title, visible text, absolute links).
    """
    soup = BeautifulSoup(html, "html.parser")
    links = extract_links(soup, page_url)
    title = normalize_whitespace(soup.title.get_text()) if soup.title else None

    for element in soup(list(STRIPPED_ELEMENTS)):
        element.decompose()
    text = normalize_whitespace(soup.get_text(separator=" "))
    return title or None, text, links

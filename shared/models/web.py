"""Pydantic models for crawled web content."""

from pydantic import BaseModel


class FetchedPage(BaseModel):
    """Raw HTTP response of a crawled page.

    Attributes:
        url:          Final URL after redirects.
        content_type: Value of the Content-Type header.
        text:         Decoded response body.
    """

    url: str
    content_type: str = ""
    text: str = ""

    def is_html(self) -> bool:
        return "html" in self.content_type.lower() or (not self.content_type and "<html" in self.text[:1000].lower())


class CrawledPage(BaseModel):
    """A crawled page after markup removal.

    Attributes:
        url:   Page URL.
        title: Content of the <title> element, if any.
        text:  Whitespace-normalised visible text.
        depth: Link distance from the seed URL (seed = 0).
    """

    url: str
    title: str | None = None
    text: str
    depth: int = 0

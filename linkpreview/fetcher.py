"""
Page fetcher: downloads a URL and exposes what the extractors need.

Pipeline position: Stage 1 (Fetcher → extractor → cache → renderer).
Input:  URL string
Output: FetchedPage (final URL, host, root URL, title, meta-tag multimap,
        parsed document)

Only called on a cache miss. Errors are wrapped in FetchError and propagate
to the caller; nothing is retried here.
"""

from typing import Optional, Union
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup, UnicodeDammit
from lxml import etree

from .config import DEFAULT_TIMEOUT, DEFAULT_USER_AGENT
from .exceptions import FetchError
from .logger import get_module_logger

logger = get_module_logger("fetcher")

HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


class FetchedPage:
    """
    A downloaded and parsed HTML page.

    `meta_tags` groups <meta> contents by the attribute that names them.
    Only the "property" group is built, since that is where Open Graph
    tags live: {"property": {"og:title": ["..."], ...}}. Keys are lower-cased
    and values keep document order, so the first value wins for extractors.
    """

    def __init__(self, url: str, html: Union[str, bytes], declared_charset: Optional[str] = None):
        self.url = url
        self.html, self.encoding = self._decode(html, declared_charset)

        parsed_url = urlparse(url)
        self.host = parsed_url.hostname
        self.root_url = f"{parsed_url.scheme}://{parsed_url.netloc}"

        self.document = BeautifulSoup(self.html, "html5lib")
        # lxml tree is built lazily; most pages only need it for the fallback extractor
        self._tree = None

        self.title = self._read_title()
        self.meta_tags = {"property": self._read_meta_properties()}

    @classmethod
    def from_html(cls, url: str, html: Union[str, bytes]) -> "FetchedPage":
        """Build a page from HTML already in hand (no network access)."""
        return cls(url, html)

    @staticmethod
    def _decode(html: Union[str, bytes], declared_charset: Optional[str]) -> tuple[str, str]:
        """
        Decode raw page bytes to text.

        A charset from the Content-Type header wins; otherwise UnicodeDammit
        reads the BOM, <?xml encoding?> or <meta charset>, then guesses.
        Text input is returned unchanged.
        """
        if isinstance(html, str):
            return html, "utf-8"
        dammit = UnicodeDammit(
            html,
            known_definite_encodings=[declared_charset] if declared_charset else [],
            is_html=True
        )
        if dammit.unicode_markup is None:
            return html.decode("utf-8", errors="replace"), "utf-8"
        return dammit.unicode_markup, dammit.original_encoding or "utf-8"

    @property
    def og_properties(self) -> dict[str, list[str]]:
        return self.meta_tags["property"]

    def xpath(self, expression: str) -> list:
        """Run an XPath query against the page and return the matching lxml nodes."""
        if self._tree is None:
            # lxml refuses str input carrying an <?xml encoding?> declaration;
            # hand it UTF-8 bytes with the encoding fixed so the declaration is ignored
            parser = etree.HTMLParser(encoding="utf-8")
            self._tree = etree.HTML((self.html or "<html></html>").encode("utf-8"), parser=parser)
        if self._tree is None:
            return []
        return self._tree.xpath(expression)

    def _read_title(self) -> Optional[str]:
        title_tag = self.document.find("title")
        if title_tag is None:
            return None
        return title_tag.get_text().strip()

    def _read_meta_properties(self) -> dict[str, list[str]]:
        properties: dict[str, list[str]] = {}
        for tag in self.document.find_all("meta", attrs={"property": True}):
            content = tag.get("content")
            if content is None:
                continue
            key = tag["property"].strip().lower()
            properties.setdefault(key, []).append(content)
        return properties


class Fetcher:
    """HTTP fetcher backed by requests."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self.session = session or requests.Session()

    def fetch(self, url: str) -> FetchedPage:
        """
        GET a URL and parse the response as HTML.

        Args:
            url: Page to fetch

        Returns:
            FetchedPage for the final URL after redirects

        Raises:
            FetchError: on connection errors, timeouts, HTTP error statuses,
                        or a non-HTML content type
        """
        logger.info(f"Fetching: {url}")
        headers = {"User-Agent": self.user_agent, "Accept": "text/html,application/xhtml+xml"}

        try:
            response = self.session.get(url, headers=headers, timeout=self.timeout, allow_redirects=True)
            response.raise_for_status()
        except requests.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            raise FetchError(
                f"HTTP error fetching {url}: {e}",
                url=url,
                status_code=status,
                details={"error": str(e)}
            ) from e
        except requests.RequestException as e:
            raise FetchError(
                f"Failed to fetch {url}: {e}",
                url=url,
                details={"error": str(e)}
            ) from e

        content_type = response.headers.get("Content-Type", "")
        mime_type = content_type.split(";")[0].strip().lower()
        if mime_type and mime_type not in HTML_CONTENT_TYPES:
            raise FetchError(
                f"Non-HTML content at {url}: {mime_type}",
                url=url,
                status_code=response.status_code,
                details={"content_type": content_type}
            )

        # requests falls back to ISO-8859-1 for text/* without a charset parameter,
        # so only trust response.encoding when the header actually named one
        declared_charset = response.encoding if "charset=" in content_type.lower() else None

        logger.debug(f"Fetched {response.url} ({response.status_code}, {len(response.content)} bytes)")
        return FetchedPage(response.url, response.content, declared_charset=declared_charset)

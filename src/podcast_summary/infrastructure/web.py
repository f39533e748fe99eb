"""Web content extraction and file downloads"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union
from urllib.parse import urlparse

from bs4 import BeautifulSoup
from readability import Document

from podcast_summary.domain.config.http import HttpConfig
from podcast_summary.domain.config.retry import RetryConfig
from podcast_summary.infrastructure.http_client import get_with_retries

logger = logging.getLogger(__name__)

DOWNLOAD_CHUNK_SIZE = 64 * 1024


class ContentExtractionError(RuntimeError):
    """No readable text could be extracted from a page."""

    pass


def is_remote(source: str) -> bool:
    """Check if a source refers to an http(s) URL"""
    return urlparse(source).scheme in ("http", "https")


def html_to_text(html: Union[str, bytes]) -> str:
    """Extract the readable article text from an HTML document

    Args:
        html: Full HTML page

    Returns:
        Article text with blank lines removed

    Raises:
        ContentExtractionError: If the page has no readable text
    """
    article_html = Document(html).summary()
    soup = BeautifulSoup(article_html, "html.parser")
    lines = (line.strip() for line in soup.get_text("\n").splitlines())
    text = "\n".join(line for line in lines if line)
    if not text:
        raise ContentExtractionError("No readable content found in page")
    return text


class WebClient:
    """Fetches pages and files over HTTP"""

    def __init__(
        self,
        http_config: Optional[HttpConfig] = None,
        retry_config: Optional[RetryConfig] = None,
    ):
        self.http_config = http_config or HttpConfig()
        self.retry_config = retry_config or RetryConfig()

    @property
    def _headers(self):
        return {"User-Agent": self.http_config.user_agent}

    def scrape(self, source: str) -> str:
        """Extract readable text from a URL or a local HTML file

        Args:
            source: http(s) URL or path to an HTML file

        Returns:
            Plain article text
        """
        if is_remote(source):
            logger.debug(f"Fetching page {source}")
            response = get_with_retries(
                source,
                timeout=self.http_config.timeout,
                retry=self.retry_config,
                headers=self._headers,
            )
            html = response.text
        else:
            path = Path(source)
            if not path.exists():
                raise FileNotFoundError(f"File not found: {path}")
            html = path.read_text(encoding="utf-8")

        try:
            text = html_to_text(html)
        except ContentExtractionError as e:
            raise ContentExtractionError(f"{e}: {source}") from e
        logger.debug(f"Extracted {len(text)} chars from {source}")
        return text

    def download(self, url: str, directory: Optional[Path] = None) -> Path:
        """Download a file to download-<timestamp><ext>

        Args:
            url: File URL
            directory: Target directory (defaults to the current directory)

        Returns:
            Path of the downloaded file
        """
        timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
        timestamp = timestamp.replace(":", "-").replace(".", "-")
        extension = Path(urlparse(url).path).suffix
        target = Path(directory or Path.cwd()) / f"download-{timestamp}{extension}"

        logger.info(f"Downloading file from {url}...")
        response = get_with_retries(
            url,
            timeout=self.http_config.timeout,
            retry=self.retry_config,
            headers=self._headers,
            stream=True,
        )
        try:
            with open(target, "wb") as f:
                for chunk in response.iter_content(chunk_size=DOWNLOAD_CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
        except OSError:
            target.unlink(missing_ok=True)
            raise
        finally:
            response.close()

        logger.debug(f"Downloaded {url} to {target}")
        return target

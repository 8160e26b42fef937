"""HTTP downloads for configs and artifacts."""

import logging
from pathlib import Path

import httpx

from .errors import FetchError, LocalFileError

logger = logging.getLogger(__name__)


def fetch_text(client: httpx.Client, url: str) -> str:
    """Fetch a URL and return its body.

    Raises:
        FetchError: Transport error or non-2xx response
    """
    logger.debug("GET %s", url)
    try:
        response = client.get(url)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        raise FetchError(url, f"HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise FetchError(url, str(e) or type(e).__name__) from e
    return response.text


def download(client: httpx.Client, url: str, dest: Path) -> Path:
    """Stream a URL to a local file.

    Args:
        client: HTTP client
        url: Source URL
        dest: Destination file (parent directories are created)

    Returns:
        The destination path

    Raises:
        FetchError: Transport error or non-2xx response
        LocalFileError: The destination could not be written
    """
    logger.debug("GET %s -> %s", url, dest)
    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        with client.stream("GET", url) as response:
            response.raise_for_status()
            with open(dest, "wb") as f:
                for chunk in response.iter_bytes():
                    f.write(chunk)
    except httpx.HTTPStatusError as e:
        raise FetchError(url, f"HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise FetchError(url, str(e) or type(e).__name__) from e
    except OSError as e:
        raise LocalFileError(e.filename or dest, e.strerror or str(e)) from e
    return dest

# =============================================================================
# lib/images.py - Image Embedding for Generated Documents
# =============================================================================
# PDFs are rendered from HTML, so images are inlined as data: URLs rather
# than fetched by the renderer. Any failure falls back to a local file.
# =============================================================================

import base64
import logging
import mimetypes
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


def to_data_url(content: bytes, content_type: str) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


def file_to_data_url(path: Path) -> str:
    """Inline a local file, guessing its type from the extension."""
    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return to_data_url(path.read_bytes(), content_type)


def _content_type(response: httpx.Response, url: str) -> str:
    header = (response.headers.get("content-type") or "").split(";")[0].strip().lower()
    if header.startswith("image/"):
        return header
    guessed = mimetypes.guess_type(url.split("?")[0])[0]
    if guessed and guessed.startswith("image/"):
        return guessed
    raise ValueError(f"Not an image: {header or 'unknown content type'}")


def image_url_to_data_url(
    url: str | None,
    fallback_file: Path,
    timeout: float = DEFAULT_TIMEOUT,
) -> str:
    """
    Download an image and return it as a data: URL.

    SVG stays SVG, PNG/JPEG stay as they are; the renderer handles all three.
    Non-HTTP sources (empty, the placeholder's relative path) and any download
    error give the fallback file instead.

    Args:
        url: Absolute image URL (public or signed)
        fallback_file: Local image used when the URL can't be loaded
        timeout: Request timeout in seconds

    Returns:
        data: URL string; "" only if the fallback file itself is unreadable
    """
    if url and url.startswith("http"):
        try:
            response = httpx.get(url, timeout=timeout, follow_redirects=True)
            response.raise_for_status()
            return to_data_url(response.content, _content_type(response, url))
        except Exception as e:
            logger.warning(f"Failed to fetch image {url.split('?')[0]}: {e}")

    try:
        return file_to_data_url(fallback_file)
    except OSError as e:
        logger.error(f"Fallback image unreadable ({fallback_file}): {e}")
        return ""

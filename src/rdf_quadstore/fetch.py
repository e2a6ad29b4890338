"""
Remote document retrieval.

Fetches RDF documents over HTTP(S) with content negotiation. Failures are
reported as RemoteFetchError / RemoteStatusError, never as parse errors.
"""
from __future__ import annotations

import logging
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urldefrag

from rdf_quadstore.config import FetchConfig
from rdf_quadstore.errors import RemoteFetchError, RemoteStatusError

logger = logging.getLogger(__name__)


@dataclass
class FetchedDocument:
    """A retrieved document and its declared media type."""
    url: str
    content: bytes
    content_type: str = ""


def defragment(uri: str) -> str:
    """Strip the fragment identifier from a URI."""
    return urldefrag(uri).url


def fetch_document(uri: str, config: Optional[FetchConfig] = None) -> FetchedDocument:
    """
    GET a document, preferring TriG, then Turtle, then JSON-LD.

    Args:
        uri: Document URI; any fragment is dropped
        config: Timeout, TLS and header settings

    Returns:
        FetchedDocument with the body and Content-Type header

    Raises:
        RemoteStatusError: the server answered with a status other than 200
        RemoteFetchError: the request could not be completed
    """
    config = config or FetchConfig()
    url = defragment(uri)
    request = urllib.request.Request(
        url,
        headers={"Accept": config.accept, "User-Agent": config.user_agent},
    )

    context = None
    if not config.verify_tls:
        context = ssl.create_default_context()
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE

    try:
        with urllib.request.urlopen(request, timeout=config.timeout_seconds, context=context) as response:
            status = getattr(response, "status", 200)
            if status != 200:
                raise RemoteStatusError(url, status)
            content = response.read()
            content_type = response.headers.get("Content-Type", "") or ""
    except urllib.error.HTTPError as e:
        raise RemoteStatusError(url, e.code) from e
    except urllib.error.URLError as e:
        raise RemoteFetchError(url, str(e.reason)) from e
    except (TimeoutError, OSError) as e:
        raise RemoteFetchError(url, str(e)) from e

    logger.info(f"Fetched {len(content)} bytes from {url} ({content_type or 'no content type'})")
    return FetchedDocument(url=url, content=content, content_type=content_type)

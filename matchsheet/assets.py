"""
Image assets referenced by the sheet (the club emblem).

The emblem is fetched once, anonymously (no cookies, no auth), and kept as
bytes. Every capture decodes its own copy so a bitmap is never shared
between exports.
"""

import io
import logging
import threading
from typing import Callable, Dict, Optional

import requests
from PIL import Image

from . import config

logger = logging.getLogger(__name__)


class AssetError(Exception):
    """An image referenced by the document could not be loaded"""


def fetch_url(url: str, timeout: float) -> bytes:
    """Download an image without sending credentials"""
    logger.info("Fetching asset %s", url)
    try:
        with requests.Session() as session:
            session.trust_env = False
            response = session.get(url, timeout=timeout, headers={'User-Agent': 'MatchSheet/1.0'})
            response.raise_for_status()
            return response.content
    except requests.RequestException as e:
        raise AssetError(f"Could not fetch {url}: {e}") from e


class AssetResolver:
    """Maps document picture sources (e.g. "emblem") to images"""

    def __init__(self, loaders: Optional[Dict[str, Callable[[], bytes]]] = None):
        self._loaders = dict(loaders or {})
        self._cache: Dict[str, bytes] = {}
        self._lock = threading.Lock()

    def has(self, source: str) -> bool:
        return source in self._loaders

    def register(self, source: str, loader: Callable[[], bytes]) -> None:
        with self._lock:
            self._loaders[source] = loader
            self._cache.pop(source, None)

    def load(self, source: str) -> Image.Image:
        """Decode the image for a source, fetching it on first use"""
        if source not in self._loaders:
            raise AssetError(f"Unknown asset: {source}")
        with self._lock:
            data = self._cache.get(source)
        if data is None:
            data = self._loaders[source]()
            with self._lock:
                self._cache[source] = data
        try:
            image = Image.open(io.BytesIO(data))
            image.load()
        except (OSError, ValueError) as e:
            raise AssetError(f"Asset {source} is not a readable image: {e}") from e
        return image.convert('RGBA')


def create_default_resolver(emblem_url: Optional[str] = None,
                            timeout: Optional[float] = None) -> AssetResolver:
    """Resolver for the configured club emblem. An empty URL disables the emblem."""
    url = config.EMBLEM_URL if emblem_url is None else emblem_url
    fetch_timeout = config.EMBLEM_TIMEOUT if timeout is None else timeout
    resolver = AssetResolver()
    if url:
        resolver.register('emblem', lambda: fetch_url(url, fetch_timeout))
    return resolver

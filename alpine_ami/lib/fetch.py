from __future__ import annotations

import hashlib
import logging
from pathlib import Path

import requests

from ..errors import FetchError, IntegrityError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024


def fetch_verified(url: str, sha256: str, dest: str, *, timeout: float = 10.0) -> str:
    """Download url to dest and verify its SHA-256 before anyone uses it.

    On mismatch the file is removed and IntegrityError is raised. There is
    no retry: a failed fetch is fatal.
    """

    p = Path(dest)
    p.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Fetching %s", url)

    h = hashlib.sha256()
    try:
        with requests.get(url, timeout=timeout, stream=True) as response:
            response.raise_for_status()
            with open(p, "wb") as f:
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    if chunk:
                        f.write(chunk)
                        h.update(chunk)
    except requests.RequestException as e:
        p.unlink(missing_ok=True)
        raise FetchError(f"Failed to fetch {url}: {e}") from e

    actual = h.hexdigest()
    if actual != sha256:
        p.unlink(missing_ok=True)
        raise IntegrityError(str(p), sha256, actual)

    logger.info("Verified %s (sha256=%s)", p.name, actual)
    return str(p)

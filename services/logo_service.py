# services/logo_service.py
"""
Company logo fetching.

Logos are downloaded and re-encoded to PNG with Pillow so that any format
the browser accepted (JPEG, WebP, palette PNG, ...) can be embedded by the
PDF renderers. Failures never propagate: the renderer falls back to an
initial avatar.
"""
import io
import logging
from typing import Optional
from urllib.parse import urlparse

import requests
from PIL import Image

import config

logger = logging.getLogger(__name__)

MAX_LOGO_BYTES = 5 * 1024 * 1024
MAX_LOGO_SIDE = 600
ALLOWED_SCHEMES = ("http", "https")


def reencode_logo(data: bytes) -> bytes:
     """
     Normalise image bytes to an RGBA PNG no larger than MAX_LOGO_SIDE.

     Raises:
          OSError: if Pillow cannot decode the data
     """
     with Image.open(io.BytesIO(data)) as img:
          img = img.convert("RGBA")
          img.thumbnail((MAX_LOGO_SIDE, MAX_LOGO_SIDE))
          out = io.BytesIO()
          img.save(out, format="PNG")
     return out.getvalue()


def _download(url: str) -> Optional[bytes]:
     """Stream at most MAX_LOGO_BYTES; None when the logo is larger."""
     with requests.get(url, timeout=config.LOGO_FETCH_TIMEOUT, stream=True) as response:
          response.raise_for_status()
          declared = response.headers.get("Content-Length")
          if declared and declared.isdigit() and int(declared) > MAX_LOGO_BYTES:
               return None

          data = bytearray()
          for chunk in response.iter_content(chunk_size=64 * 1024):
               data.extend(chunk)
               if len(data) > MAX_LOGO_BYTES:
                    return None
     return bytes(data)


def fetch_logo(url: Optional[str]) -> Optional[bytes]:
     """Download and re-encode a logo; None when absent or on any failure."""
     if not url:
          return None
     if urlparse(url).scheme not in ALLOWED_SCHEMES:
          logger.warning("Logo URL %s is not http(s), using avatar", url)
          return None
     try:
          data = _download(url)
          if data is None:
               logger.warning("Logo at %s exceeds %d bytes, using avatar", url, MAX_LOGO_BYTES)
               return None
          return reencode_logo(data)
     except requests.RequestException as e:
          logger.warning("Failed to fetch logo %s: %s", url, e)
     except (OSError, ValueError) as e:
          logger.warning("Failed to decode logo %s: %s", url, e)
     return None

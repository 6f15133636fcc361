"""Resource document decoding and external resource download."""

from __future__ import annotations

from .downloader import HttpResourceDownloader
from .parser import PHOTO_ACCEPTS, parse_documents

__all__ = ["PHOTO_ACCEPTS", "HttpResourceDownloader", "parse_documents"]

"""Cached XSLT stylesheets and transformation into HTTP responses."""

from __future__ import annotations

import os
import threading
import time
from dataclasses import dataclass

from lxml import etree

from icestream.netutil import build_http_header

__all__ = ["XsltError", "StylesheetCache", "transform"]

_XSL_NS = "http://www.w3.org/1999/XSL/Transform"
_CACHE_SIZE = 3


class XsltError(Exception):
    """Raised when a stylesheet cannot be read, parsed or applied."""


@dataclass(frozen=True)
class _CompiledStylesheet:
    xslt: etree.XSLT
    method: str | None
    encoding: str | None
    media_type: str | None

    @property
    def content_type(self) -> str:
        if self.media_type:
            return self.media_type
        if self.method == "html":
            return "text/html"
        if self.method == "text":
            return "text/plain"
        return "text/xml"


@dataclass
class _CacheEntry:
    filename: str
    last_modified: float
    cache_age: float
    stylesheet: _CompiledStylesheet | None


def _load(filename: str) -> _CompiledStylesheet | None:
    parser = etree.XMLParser(load_dtd=True, resolve_entities=True)
    try:
        document = etree.parse(filename, parser)
        compiled = etree.XSLT(document)
    except (etree.LxmlError, OSError):
        return None
    settings: dict[str, str] = {}
    for output in document.getroot().iterfind(f"{{{_XSL_NS}}}output"):
        settings.update(
            (key, value)
            for key, value in output.attrib.items()
            if key in ("method", "encoding", "media-type")
        )
    return _CompiledStylesheet(
        compiled,
        settings.get("method"),
        settings.get("encoding"),
        settings.get("media-type"),
    )


def _same_file(left: str, right: str) -> bool:
    if os.name == "nt":
        return left.casefold() == right.casefold()
    return left == right


class StylesheetCache:
    """A small cache of parsed stylesheets, reloaded when the file changes."""

    def __init__(self, size: int = _CACHE_SIZE) -> None:
        if size < 1:
            raise ValueError("cache size must be at least 1")
        self._slots: list[_CacheEntry | None] = [None] * size
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return sum(entry is not None for entry in self._slots)

    def __contains__(self, filename: object) -> bool:
        if not isinstance(filename, (str, os.PathLike)):
            return False
        name = os.fspath(filename)
        return any(
            entry is not None and _same_file(entry.filename, name)
            for entry in self._slots
        )

    def _evict(self) -> int:
        # The entry with the greatest cache age gives up its slot.
        filled = [
            (index, entry) for index, entry in enumerate(self._slots) if entry is not None
        ]
        return max(filled, key=lambda item: item[1].cache_age)[0]

    @staticmethod
    def _checked(entry: _CacheEntry) -> _CompiledStylesheet:
        if entry.stylesheet is None:
            raise XsltError(f"problem reading stylesheet {entry.filename!r}")
        return entry.stylesheet

    def get(self, filename) -> _CompiledStylesheet:
        """Return the parsed stylesheet for *filename*, loading it if needed."""
        name = os.fspath(filename)
        try:
            mtime = os.stat(name).st_mtime
        except OSError as exc:
            raise XsltError(
                f"Error checking for stylesheet file {name!r}: {exc.strerror}"
            ) from exc
        with self._lock:
            empty = None
            for index, entry in enumerate(self._slots):
                if entry is None:
                    empty = index
                    continue
                if _same_file(entry.filename, name):
                    if mtime > entry.last_modified:
                        entry.last_modified = mtime
                        entry.stylesheet = _load(name)
                        entry.cache_age = time.time()
                    return self._checked(entry)
            slot = empty if empty is not None else self._evict()
            entry = _CacheEntry(name, mtime, time.time(), _load(name))
            self._slots[slot] = entry
            return self._checked(entry)

    def clear(self) -> None:
        """Drop every cached stylesheet."""
        with self._lock:
            self._slots = [None] * len(self._slots)


def transform(cache: StylesheetCache, doc, xsl_filename, server_id: str) -> bytes:
    """Apply a stylesheet to *doc* and return a complete HTTP 200 response.

    *doc* may be a parsed lxml document or element, or XML text.  Raises
    XsltError when the stylesheet cannot be used or applied.
    """
    try:
        stylesheet = cache.get(xsl_filename)
    except XsltError as exc:
        raise XsltError("Could not parse XSLT file") from exc
    try:
        if isinstance(doc, str):
            doc = etree.fromstring(doc.encode("utf-8"))
        elif isinstance(doc, bytes):
            doc = etree.fromstring(doc)
        result = stylesheet.xslt(doc)
        body = bytes(result)
    except etree.LxmlError as exc:
        raise XsltError("XSLT problem") from exc
    header = build_http_header(
        server_id,
        200,
        None,
        stylesheet.content_type,
        stylesheet.encoding,
        cache=False,
    )
    return (
        header.encode("utf-8")
        + f"Content-Length: {len(body)}\r\n\r\n".encode("ascii")
        + body
    )
"""Streaming-server helpers: socket and HTTP headers, XSLT responses and a statistics board."""

__version__ = "0.1.0"
__all__ = ["netutil", "xslt", "statsboard", "monitor"]
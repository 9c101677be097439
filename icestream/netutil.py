"""Socket, HTTP header, charset and line-reading helpers."""

from __future__ import annotations

import select
import time
from datetime import datetime, timezone
from typing import IO, AnyStr

__all__ = [
    "timed_wait_for_fd",
    "read_header",
    "build_http_header",
    "convert_string",
    "get_line",
]

_DAYS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
_MONTHS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

_STATUS_MESSAGES = {
    200: "OK",
    206: "Partial Content",
    400: "Bad Request",
    401: "Authentication Required",
    403: "Forbidden",
    404: "File Not Found",
    416: "Request Range Not Satisfiable",
}

_NO_CACHE_HEADERS = (
    "Cache-Control: no-cache\r\n"
    "Expires: Mon, 26 Jul 1997 05:00:00 GMT\r\n"
    "Pragma: no-cache\r\n"
)
_AUTH_HEADER = 'WWW-Authenticate: Basic realm="Icecast2 Server"\r\n'


def timed_wait_for_fd(fd, timeout: int) -> bool:
    """Wait up to *timeout* milliseconds for *fd* to become readable.

    A negative timeout waits without limit.  Errors raise OSError.
    """
    wait = None if timeout < 0 else timeout / 1000
    readable, _, _ = select.select([fd], [], [], wait)
    return bool(readable)


def read_header(sock, max_length: int, entire: bool, timeout: float) -> str:
    """Read a request line or a whole header block from *sock*.

    Carriage returns are dropped.  With *entire* the read ends at a blank
    line, otherwise at the first newline after at least two characters.
    At most ``max_length - 1`` characters are kept.  *timeout* is the
    number of seconds to wait for each byte.

    Raises TimeoutError if no data arrives in time, ConnectionError if the
    peer closes first, and ValueError if the header does not fit.
    """
    terminator = b"\n\n" if entire else b"\n"
    wait_ms = int(timeout * 1000)
    buf = bytearray()
    while len(buf) < max_length - 1:
        if not timed_wait_for_fd(sock, wait_ms):
            raise TimeoutError("timed out waiting for header data")
        byte = sock.recv(1)
        if not byte:
            raise ConnectionError("connection closed before header was complete")
        if byte != b"\r":
            buf += byte
        if len(buf) > 1 and buf.endswith(terminator):
            return buf.decode("latin-1")
    raise ValueError(f"header longer than {max_length - 1} characters")


def _http_date(now: datetime | float | None) -> str:
    if now is None:
        stamp = time.gmtime()
    elif isinstance(now, datetime):
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        stamp = now.astimezone(timezone.utc).timetuple()
    else:
        stamp = time.gmtime(now)
    return (
        f"{_DAYS[stamp.tm_wday]}, {stamp.tm_mday:02d} {_MONTHS[stamp.tm_mon - 1]} "
        f"{stamp.tm_year} {stamp.tm_hour:02d}:{stamp.tm_min:02d}:{stamp.tm_sec:02d} GMT"
    )


def build_http_header(
    server_id: str,
    status: int | None,
    status_message: str | None = None,
    content_type: str | None = None,
    charset: str | None = None,
    cache: bool = True,
    datablock: str | None = None,
    now: datetime | float | None = None,
) -> str:
    """Build an HTTP response header.

    A *status* of None leaves out the status line.  Without a
    *status_message* a default text for the code is used.  Unless *cache*
    is set, headers forbidding caching are added.  If *datablock* is
    given, the header is terminated and the data appended.  *now* is the
    time for the Date header, defaulting to the current time.
    """
    parts = []
    if status is not None:
        http_version = "1.0"
        if status_message is None:
            status_message = _STATUS_MESSAGES.get(status, "(unknown status code)")
            if status == 206:
                http_version = "1.1"
        parts.append(f"HTTP/{http_version} {status} {status_message}\r\n")
    parts.append(f"Server: {server_id}\r\n")
    parts.append(f"Date: {_http_date(now)}\r\n")
    if content_type is not None:
        if charset is not None:
            parts.append(f"Content-Type: {content_type}; charset={charset}\r\n")
        else:
            parts.append(f"Content-Type: {content_type}\r\n")
    if status == 401:
        parts.append(_AUTH_HEADER)
    if not cache:
        parts.append(_NO_CACHE_HEADERS)
    if datablock is not None:
        parts.append("\r\n")
        parts.append(datablock)
    return "".join(parts)


def convert_string(text: bytes, in_charset: str, out_charset: str) -> bytes:
    """Re-encode *text* from *in_charset* to *out_charset*.

    Raises LookupError for an unknown charset and UnicodeError when the
    text cannot be converted.
    """
    return bytes(text).decode(in_charset).encode(out_charset)


def get_line(file: IO[AnyStr]) -> AnyStr | None:
    """Read one line from *file* without its line ending; None at end of file."""
    line = file.readline()
    if not line:
        return None
    newline, carriage = ("\n", "\r") if isinstance(line, str) else (b"\n", b"\r")
    if line.endswith(newline):
        line = line[:-1]
        if line.endswith(carriage):
            line = line[:-1]
    return line
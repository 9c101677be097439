# icestream

Building blocks for an internet radio streaming server:

- **`icestream.netutil`**: waiting on a socket with a timeout, reading a
  request line or header block, building HTTP response headers, converting
  text between character sets and reading lines from files.
- **`icestream.xslt`**: a small cache of parsed stylesheets and the
  `transform` function that turns an XML document into a complete HTTP 200
  response.
- **`icestream.statsboard`**: a board of global and per-mount statistics fed
  from the server's stats XML, with a list of promoted statistics and one
  statistic chosen as a window title.
- **`icestream.monitor`**: the settings that go with the board (column
  widths, autostart, promoted statistics, title) kept in an INI file, plus
  small display helpers.

Installing needs `lxml`.

## Reading headers and building responses

```python
from icestream.netutil import build_http_header, read_header

request = read_header(sock, 4096, entire=True, timeout=10)

header = build_http_header(
    "icestream",          # server id
    200,
    content_type="text/html",
    charset="utf-8",
    cache=False,
)
```

`read_header` drops carriage returns and stops at a blank line (with
`entire=True`) or at the end of the first line. It raises `TimeoutError` if
no byte arrives within `timeout` seconds, `ConnectionError` if the peer
closes first and `ValueError` if the header does not fit in
`max_length - 1` characters.

`build_http_header` always writes `Server:` and `Date:` lines. A status of
`None` leaves out the status line; without a status message the usual text
for the code is used (206 answers as HTTP/1.1, other codes as HTTP/1.0). A
401 adds a `WWW-Authenticate` header, `cache=False` adds the no-cache
headers, and a `datablock` ends the header and is appended after it. `now`
(a `datetime` or a timestamp) fixes the Date header.

`convert_string(b"...", "latin-1", "utf-8")` re-encodes bytes, and
`get_line(file)` returns one line without its `\n` or `\r\n`, or `None` at
end of file.

## XSLT pages

```python
from icestream.xslt import StylesheetCache, XsltError, transform

cache = StylesheetCache(3)
try:
    response = transform(cache, stats_document, "web/status.xsl", "icestream")
except XsltError:
    ...  # the stylesheet could not be read, parsed or applied
```

`transform` accepts an lxml document or element, or XML as `str` or
`bytes`, and returns the response as bytes: status line, headers (no-cache,
`Content-Type` taken from the stylesheet's `xsl:output` media type or
method, `Content-Length`) and body. A stylesheet is parsed once and parsed
again only when its file is newer; when every slot is taken the entry with
the greatest cache age gives up its slot.

## Statistics board

```python
from icestream.statsboard import StatsBoard
from icestream.monitor import MonitorSettings, format_running_time, get_tag

board = StatsBoard()
board.update_from_xml(stats_xml)
board.add_additional("/live.ogg", "listeners")
board.set_title("/live.ogg", "listeners")
board.window_title()            # "/live.ogg - listeners - <value>"

settings = MonitorSettings.read("monitor.ini")
settings.write("monitor.ini", board)

format_running_time(90061)      # "1 Days, 1 Hours, 1 Minutes, 1 Seconds"
get_tag("<port>8000</port>", "port")   # "8000"
```

A `source` element without a `listeners` child is kept as a disconnected,
empty mount. Each mount holds at most 60 statistics and the board at most
1024 mounts. `update_from_xml` raises `ValueError` for an empty document or
one that is not XML.

## What this package does not do

It is a set of helpers, not a server. It does not accept listener or source
connections, stream audio, produce the stats XML itself, list mounts on
stream directories, or draw a monitoring window; there is no command to run.
Callers supply the sockets, documents and files these helpers work on.
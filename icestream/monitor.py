"""Settings of the monitoring window and small display helpers."""

from __future__ import annotations

import configparser
import os
import re
from dataclasses import dataclass, field

from icestream.statsboard import StatsBoard

__all__ = ["MonitorSettings", "get_tag", "format_running_time"]

SECTION = "icecast2"
DEFAULT_SETTINGS_FILE = "icecast2.ini"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")

_WIDTH_KEYS = (
    ("source0_width", "col0SourceWidth", 163),
    ("stats0_width", "col0StatsWidth", 100),
    ("stats1_width", "col1StatsWidth", 150),
    ("global0_width", "col0GStatsWidth", 150),
    ("global1_width", "col1GStatsWidth", 150),
    ("global2_width", "col2GStatsWidth", 150),
)


def _new_parser() -> configparser.ConfigParser:
    parser = configparser.ConfigParser(interpolation=None, strict=False)
    parser.optionxform = str  # keep key case as written
    return parser


def _profile_int(section: configparser.SectionProxy | None, key: str, default: int) -> int:
    if section is None or key not in section:
        return default
    match = _LEADING_INT.match(section[key])
    return int(match.group(1)) if match else 0


def _profile_str(section: configparser.SectionProxy | None, key: str, default: str) -> str:
    if section is None or key not in section:
        return default
    return section[key]


@dataclass
class MonitorSettings:
    """Column widths, autostart, promoted statistics and the title statistic."""

    source0_width: int = 163
    stats0_width: int = 100
    stats1_width: int = 150
    global0_width: int = 150
    global1_width: int = 150
    global2_width: int = 150
    autostart: bool = False
    additional_stats: list[tuple[str, str]] = field(default_factory=list)
    title: tuple[str, str] | None = None

    @staticmethod
    def read(path=DEFAULT_SETTINGS_FILE) -> "MonitorSettings":
        """Load settings from an INI file; missing keys take their defaults."""
        parser = _new_parser()
        parser.read(os.fspath(path), encoding="utf-8")
        section = parser[SECTION] if parser.has_section(SECTION) else None

        settings = MonitorSettings(
            **{attr: _profile_int(section, key, default) for attr, key, default in _WIDTH_KEYS}
        )
        settings.autostart = _profile_str(section, "AutoStart", "0") == "1"

        count = _profile_int(section, "numAdditionalStats", 0)
        settings.additional_stats = [
            (
                _profile_str(section, f"AdditionalStatsSource{index}", ""),
                _profile_str(section, f"AdditionalStatsName{index}", ""),
            )
            for index in range(max(count, 0))
        ]

        title = _profile_str(section, "TitleName", "")
        source, bar, name = title.partition("|")
        if title and bar:
            settings.title = (source, name)
        return settings

    def write(self, path, board: StatsBoard) -> None:
        """Store these settings and the board's promoted list and title in *path*.

        Other sections and keys already in the file are kept.  The title
        entry is written only when the board has a title statistic.
        """
        name = os.fspath(path)
        parser = _new_parser()
        parser.read(name, encoding="utf-8")
        if not parser.has_section(SECTION):
            parser.add_section(SECTION)
        section = parser[SECTION]

        for attr, key, _default in _WIDTH_KEYS:
            section[key] = str(getattr(self, attr))
        section["AutoStart"] = "1" if self.autostart else "0"

        stale = [
            key
            for key in section
            if key.startswith(("AdditionalStatsSource", "AdditionalStatsName"))
        ]
        for key in stale:
            del section[key]
        section["numAdditionalStats"] = str(len(board.additional))
        for index, extra in enumerate(board.additional):
            section[f"AdditionalStatsSource{index}"] = extra.source
            section[f"AdditionalStatsName{index}"] = extra.name

        if board.title is not None:
            source, stat = board.title
            section["TitleName"] = f"{source}|{stat}"

        with open(name, "w", encoding="utf-8") as handle:
            parser.write(handle)


def get_tag(text: str, tag: str) -> str | None:
    """Return the text between ``<tag>`` and the following ``</tag>``, or None."""
    open_tag = f"<{tag}>"
    start = text.find(open_tag)
    if start < 0:
        return None
    start += len(open_tag)
    end = text.find(f"</{tag}>", start)
    if end < 0:
        return None
    return text[start:end]


def format_running_time(seconds: float) -> str:
    """Describe a running time as days, hours, minutes and seconds."""
    total = int(seconds)
    if total < 0:
        raise ValueError("running time must not be negative")
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{days} Days, {hours} Hours, {minutes} Minutes, {secs} Seconds"
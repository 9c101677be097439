import configparser

import pytest

from icestream.monitor import MonitorSettings, format_running_time, get_tag
from icestream.statsboard import StatsBoard


def _section(path):
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str
    parser.read(path, encoding="utf-8")
    return parser["icecast2"]


def test_read_missing_file_gives_defaults(tmp_path):
    settings = MonitorSettings.read(tmp_path / "absent.ini")
    assert settings.source0_width == 163
    assert settings.stats0_width == 100
    assert settings.stats1_width == 150
    assert settings.global2_width == 150
    assert settings.autostart is False
    assert settings.additional_stats == []
    assert settings.title is None


def test_round_trip_with_board(tmp_path):
    path = tmp_path / "icecast2.ini"
    board = StatsBoard()
    board.add_additional("/live", "listeners")
    board.add_additional("/other", "title")
    assert board.set_title("/other", "title")

    settings = MonitorSettings(source0_width=200, stats1_width=75, autostart=True)
    settings.write(path, board)
    loaded = MonitorSettings.read(path)

    assert loaded.source0_width == 200
    assert loaded.stats1_width == 75
    assert loaded.stats0_width == settings.stats0_width
    assert loaded.autostart is True
    assert loaded.additional_stats == [("/live", "listeners"), ("/other", "title")]
    assert loaded.title == ("/other", "title")


def test_write_uses_source_key_names(tmp_path):
    path = tmp_path / "icecast2.ini"
    board = StatsBoard()
    board.add_additional("/live", "bitrate")
    MonitorSettings(autostart=False).write(path, board)
    section = _section(path)
    assert section["AutoStart"] == "0"
    assert section["numAdditionalStats"] == "1"
    assert section["AdditionalStatsSource0"] == "/live"
    assert section["AdditionalStatsName0"] == "bitrate"
    assert "TitleName" not in section


def test_write_keeps_existing_title_and_other_sections(tmp_path):
    path = tmp_path / "icecast2.ini"
    path.write_text("[other]\nkey = value\n[icecast2]\nTitleName = /a|b\n", encoding="utf-8")
    MonitorSettings().write(path, StatsBoard())
    parser = configparser.ConfigParser(interpolation=None)
    parser.optionxform = str
    parser.read(path, encoding="utf-8")
    assert parser["other"]["key"] == "value"
    assert MonitorSettings.read(path).title == ("/a", "b")


def test_title_without_separator_is_ignored(tmp_path):
    path = tmp_path / "icecast2.ini"
    path.write_text("[icecast2]\nTitleName = nothing\nAutoStart = 1\n", encoding="utf-8")
    settings = MonitorSettings.read(path)
    assert settings.title is None
    assert settings.autostart is True


def test_non_numeric_width_reads_as_zero(tmp_path):
    path = tmp_path / "icecast2.ini"
    path.write_text("[icecast2]\ncol0SourceWidth = wide\ncol0StatsWidth = 42px\n", encoding="utf-8")
    settings = MonitorSettings.read(path)
    assert settings.source0_width == 0
    assert settings.stats0_width == 42


def test_get_tag_finds_contents():
    assert get_tag("<a><port>8000</port></a>", "port") == "8000"


@pytest.mark.parametrize(
    "text",
    ["<port>8000", "no tags here", "</port>8000<port>"],
)
def test_get_tag_missing(text):
    assert get_tag(text, "port") is None


def test_format_running_time_zero():
    assert format_running_time(0) == "0 Days, 0 Hours, 0 Minutes, 0 Seconds"


def test_format_running_time_components():
    assert format_running_time(90061) == "1 Days, 1 Hours, 1 Minutes, 1 Seconds"


def test_format_running_time_negative():
    with pytest.raises(ValueError):
        format_running_time(-1)
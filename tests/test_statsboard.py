import pytest

from icestream.statsboard import (
    GLOBAL_SOURCE,
    MAX_STATS_PER_SOURCE,
    StatsBoard,
)

STATS_XML = """<?xml version="1.0"?>
<icestats>
  <clients>3</clients>
  <sources>1</sources>
  <source mount="/live.ogg">
    <listeners>2</listeners>
    <title>Song</title>
  </source>
  <source mount="/gone.ogg">
    <bitrate>128</bitrate>
  </source>
</icestats>
"""


def test_global_statistic_added_and_updated():
    board = StatsBoard()
    board.add_update_statistic(None, "clients", "1")
    board.add_update_statistic(None, "clients", "5")
    assert board.global_stats == {"clients": "5"}


def test_source_statistic_creates_source():
    board = StatsBoard()
    board.add_update_statistic("/a", "listeners", "4")
    assert board.sources["/a"].stats == {"listeners": "4"}
    assert board.sources["/a"].populated


def test_statistic_limit_per_source():
    board = StatsBoard()
    for index in range(MAX_STATS_PER_SOURCE):
        assert board.add_update_statistic("/a", f"s{index}", "v")
    assert board.add_update_statistic("/a", "extra", "v") is False
    assert len(board.sources["/a"].stats) == MAX_STATS_PER_SOURCE
    assert board.add_update_statistic("/a", "s0", "new")
    assert board.sources["/a"].stats["s0"] == "new"


def test_additional_is_unique_and_removable():
    board = StatsBoard()
    board.add_additional("/a", "listeners")
    board.add_additional("/a", "listeners")
    assert [(a.source, a.name) for a in board.additional] == [("/a", "listeners")]
    assert board.remove_additional("/a", "listeners")
    assert board.additional == []
    assert board.remove_additional("/a", "listeners") is False


def test_additional_value_follows_source():
    board = StatsBoard()
    board.add_additional("/a", "listeners")
    board.add_update_statistic("/a", "listeners", "7")
    assert board.additional[0].value == "7"


def test_update_from_xml():
    board = StatsBoard()
    board.update_from_xml(STATS_XML)
    assert board.global_stats == {"clients": "3", "sources": "1"}
    assert board.sources["/live.ogg"].stats == {"listeners": "2", "title": "Song"}
    assert board.sources["/gone.ogg"].populated is False
    assert board.sources["/gone.ogg"].stats == {}


def test_update_from_xml_replaces_previous():
    board = StatsBoard()
    board.add_update_statistic(None, "old", "x")
    board.update_from_xml("<icestats><clients>1</clients></icestats>")
    assert board.global_stats == {"clients": "1"}
    assert board.sources == {}


@pytest.mark.parametrize("bad", ["", "   ", "<icestats>"])
def test_update_from_xml_rejects_bad_documents(bad):
    with pytest.raises(ValueError):
        StatsBoard().update_from_xml(bad)


def test_title_from_additional():
    board = StatsBoard()
    board.update_from_xml(STATS_XML)
    board.add_additional("/live.ogg", "title")
    assert board.set_title("/live.ogg", "title")
    assert board.window_title() == "/live.ogg - title - Song"


def test_title_from_global():
    board = StatsBoard()
    board.update_from_xml(STATS_XML)
    assert board.set_title(GLOBAL_SOURCE, "clients")
    assert board.window_title() == "Global Stat - clients - 3"


def test_unknown_title_is_refused():
    board = StatsBoard()
    assert board.set_title("/nowhere", "x") is False
    assert board.title is None
    assert board.window_title() is None


def test_clear_title():
    board = StatsBoard()
    board.add_update_statistic(None, "clients", "2")
    board.set_title(GLOBAL_SOURCE, "clients")
    board.clear_title()
    assert board.title is None
    assert board.window_title() is None
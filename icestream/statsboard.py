"""In-memory board of server statistics as shown by the monitoring window."""

from __future__ import annotations

from dataclasses import dataclass, field

from lxml import etree

__all__ = ["StatsBoard", "SourceStats", "AdditionalStat", "GLOBAL_SOURCE"]

GLOBAL_SOURCE = "Global Stat"
MAX_STATS_PER_SOURCE = 60
MAX_SOURCES = 1024


@dataclass
class SourceStats:
    """Statistics reported for one mount point."""

    stats: dict[str, str] = field(default_factory=dict)
    populated: bool = True


@dataclass
class AdditionalStat:
    """A per-source statistic promoted to the global list."""

    source: str
    name: str
    value: str = ""


class StatsBoard:
    """Global and per-source statistics, the promoted list and the title choice."""

    def __init__(self) -> None:
        self.global_stats: dict[str, str] = {}
        self.sources: dict[str, SourceStats] = {}
        self.additional: list[AdditionalStat] = []
        self.title: tuple[str, str] | None = None

    def _stats_for(self, source: str | None) -> dict[str, str]:
        if source is None or source == GLOBAL_SOURCE:
            return self.global_stats
        entry = self.sources.get(source)
        if entry is None:
            if len(self.sources) >= MAX_SOURCES:
                return self.global_stats
            entry = SourceStats()
            self.sources[source] = entry
        return entry.stats

    def _find_additional(self, source: str, name: str) -> AdditionalStat | None:
        return next(
            (a for a in self.additional if a.source == source and a.name == name),
            None,
        )

    def _refresh_additional(self) -> None:
        for extra in self.additional:
            entry = self.sources.get(extra.source)
            if entry is not None and entry.populated and extra.name in entry.stats:
                extra.value = entry.stats[extra.name]

    def add_update_statistic(self, source: str | None, name: str, value: str) -> bool:
        """Set a statistic; *source* None means a global one.

        Returns False when the source already holds the maximum number of
        statistics and *name* is new.
        """
        stats = self._stats_for(source)
        if name not in stats and len(stats) >= MAX_STATS_PER_SOURCE:
            return False
        stats[name] = value
        self._refresh_additional()
        return True

    def add_additional(self, source: str, name: str) -> None:
        """Promote a source statistic to the global list unless already there."""
        if self._find_additional(source, name) is None:
            self.additional.append(AdditionalStat(source, name))
            self._refresh_additional()

    def remove_additional(self, source: str, name: str) -> bool:
        """Drop a promoted statistic; returns whether one was removed."""
        extra = self._find_additional(source, name)
        if extra is None:
            return False
        self.additional.remove(extra)
        return True

    def set_title(self, source: str, name: str) -> bool:
        """Choose the statistic shown in the window title.

        The statistic must be on the promoted list or among the known
        statistics; otherwise nothing changes and False is returned.
        """
        known = self._find_additional(source, name) is not None
        if not known:
            if source == GLOBAL_SOURCE:
                known = name in self.global_stats
            else:
                entry = self.sources.get(source)
                known = entry is not None and name in entry.stats
        if not known:
            return False
        self.clear_title()
        self.title = (source, name)
        return True

    def clear_title(self) -> None:
        """Forget the statistic chosen for the window title."""
        self.title = None

    def update_from_xml(self, xml_text: str | bytes) -> None:
        """Replace global and source statistics with those of a stats document.

        A ``source`` element whose children include no ``listeners`` is
        taken as disconnected: it is kept, unpopulated and without stats.
        Raises ValueError for a document that is empty or not XML.
        """
        data = xml_text.encode("utf-8") if isinstance(xml_text, str) else xml_text
        if not data or not data.strip():
            raise ValueError("empty XML document")
        try:
            root = etree.fromstring(data)
        except etree.XMLSyntaxError as exc:
            raise ValueError(f"invalid stats document: {exc}") from exc
        if root is None:
            raise ValueError("empty XML document")

        self.global_stats = {}
        self.sources = {}
        for node in root:
            if not isinstance(node.tag, str):
                continue
            if node.tag == "source":
                self._update_source(node)
            else:
                self.add_update_statistic(None, node.tag, "".join(node.itertext()))
        self._refresh_additional()

    def _update_source(self, node) -> None:
        mount = node.get("mount")
        has_listeners = False
        for child in node:
            if not isinstance(child.tag, str):
                continue
            if child.tag == "listeners":
                has_listeners = True
            self.add_update_statistic(mount, child.tag, "".join(child.itertext()))
        if not has_listeners and mount is not None and mount in self.sources:
            self.sources[mount] = SourceStats(populated=False)

    def window_title(self) -> str | None:
        """Return ``source - name - value`` for the title statistic, if any."""
        if self.title is None:
            return None
        source, name = self.title
        extra = self._find_additional(source, name)
        if extra is not None:
            return f"{source} - {name} - {extra.value}"
        if source == GLOBAL_SOURCE:
            if name in self.global_stats:
                return f"{GLOBAL_SOURCE} - {name} - {self.global_stats[name]}"
            return None
        entry = self.sources.get(source)
        if entry is not None and name in entry.stats:
            return f"{source} - {name} - {entry.stats[name]}"
        return None
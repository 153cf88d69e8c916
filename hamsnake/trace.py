"""Per-turn log of what an agent is thinking.

Each channel holds at most one entry per turn: a coordinate list (a plan or
a cycle in visiting order), a boolean grid (unreachable cells), ``NO_ENTRY``
or, for the cycle channel, ``UNCHANGED`` meaning "same as the last cycle
entry" so consumers do not re-emit a full board every turn.
"""

from __future__ import annotations

import logging
import os
from enum import Enum
from typing import Any, Dict, List, Union

import msgpack

from .geometry import Coord
from .grid import Grid

logger = logging.getLogger(__name__)

# On-disk format version for the msgpack payload.
TRACE_FORMAT_VERSION = 1


class Channel(Enum):
    CYCLE = "cycles"
    PLAN = "plans"
    UNREACHABLE = "unreachables"


class _Marker:
    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name

    def __repr__(self) -> str:
        return self.name

    def __reduce__(self):
        return self.name


NO_ENTRY = _Marker("NO_ENTRY")
UNCHANGED = _Marker("UNCHANGED")

Entry = Union[_Marker, List[Coord], Grid]


class AgentLog:
    """Channel -> per-turn entries."""

    def __init__(self) -> None:
        self.logs: Dict[Channel, List[Entry]] = {channel: [] for channel in Channel}

    def add(self, turn: int, channel: Channel, value: Entry) -> None:
        entries = self.logs[channel]
        if len(entries) > turn:
            raise ValueError(f"{channel.value} already has an entry for turn {turn}")
        while len(entries) < turn:
            entries.append(NO_ENTRY)
        entries.append(value)

    def entry(self, channel: Channel, turn: int) -> Entry:
        entries = self.logs[channel]
        if 0 <= turn < len(entries):
            return entries[turn]
        return NO_ENTRY

    def latest_cycle(self, turn: int) -> Entry:
        """Resolve ``UNCHANGED`` markers back to the last full cycle at or before ``turn``."""
        entries = self.logs[Channel.CYCLE]
        for t in range(min(turn, len(entries) - 1), -1, -1):
            value = entries[t]
            if value is not NO_ENTRY and value is not UNCHANGED:
                return value
        return NO_ENTRY

    def __len__(self) -> int:
        return max((len(entries) for entries in self.logs.values()), default=0)

    # ----------------------------
    # Persistence
    # ----------------------------
    def to_payload(self) -> Dict[str, Any]:
        return {
            "v": TRACE_FORMAT_VERSION,
            "channels": {
                channel.value: [_encode_entry(e) for e in entries]
                for channel, entries in self.logs.items()
            },
        }

    @classmethod
    def from_payload(cls, payload: Dict[str, Any]) -> "AgentLog":
        version = payload.get("v")
        if version != TRACE_FORMAT_VERSION:
            raise ValueError(f"Unsupported trace format version: {version!r}")
        log = cls()
        channels = payload.get("channels", {})
        for channel in Channel:
            log.logs[channel] = [_decode_entry(e) for e in channels.get(channel.value, [])]
        return log

    def save(self, path: str) -> None:
        """Write the trace as msgpack (temp file + atomic replace)."""
        directory = os.path.dirname(path)
        if directory:
            os.makedirs(directory, exist_ok=True)
        blob = msgpack.packb(self.to_payload(), use_bin_type=True)
        tmp_path = path + ".tmp"
        try:
            with open(tmp_path, "wb") as f:
                f.write(blob)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, path)
        finally:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
        logger.info("Saved agent trace (%d turns) to %s", len(self), path)

    @classmethod
    def load(cls, path: str) -> "AgentLog":
        with open(path, "rb") as f:
            payload = msgpack.unpackb(f.read(), raw=False, strict_map_key=False)
        return cls.from_payload(payload)


def _encode_entry(entry: Entry) -> Dict[str, Any]:
    if entry is NO_ENTRY:
        return {"t": "none"}
    if entry is UNCHANGED:
        return {"t": "same"}
    if isinstance(entry, Grid):
        return {"t": "grid", "w": entry.w, "h": entry.h, "v": [bool(v) for v in entry]}
    return {"t": "path", "v": [[c[0], c[1]] for c in entry]}


def _decode_entry(raw: Dict[str, Any]) -> Entry:
    kind = raw.get("t")
    if kind == "none":
        return NO_ENTRY
    if kind == "same":
        return UNCHANGED
    if kind == "grid":
        w, h = int(raw["w"]), int(raw["h"])
        values = list(raw["v"])
        return Grid.from_rows([values[y * w:(y + 1) * w] for y in range(h)])
    if kind == "path":
        return [(int(x), int(y)) for x, y in raw["v"]]
    raise ValueError(f"Unknown trace entry type: {kind!r}")

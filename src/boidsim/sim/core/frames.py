"""Struct-of-arrays records for the entity collections exchanged every tick.

A frame holds one list per field. Updaters read frames and build new ones;
they never write into a frame they were given.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping


class FrameShapeError(ValueError):
    """Raised when the columns of a frame do not line up."""


@dataclass(slots=True)
class AgentFrame:
    x: List[float] = field(default_factory=list)
    y: List[float] = field(default_factory=list)
    vx: List[float] = field(default_factory=list)
    vy: List[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.x)

    def validate(self, name: str = "agents") -> None:
        lengths = {"x": len(self.x), "y": len(self.y), "vx": len(self.vx), "vy": len(self.vy)}
        if len(set(lengths.values())) > 1:
            raise FrameShapeError(f"{name} frame has mismatched column lengths: {lengths}")

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, float]]) -> "AgentFrame":
        frame = cls()
        for record in records:
            frame.x.append(float(record["x"]))
            frame.y.append(float(record["y"]))
            frame.vx.append(float(record["vx"]))
            frame.vy.append(float(record["vy"]))
        return frame

    def to_records(self) -> List[Dict[str, float]]:
        return [
            {"x": x, "y": y, "vx": vx, "vy": vy}
            for x, y, vx, vy in zip(self.x, self.y, self.vx, self.vy)
        ]

    def copy(self) -> "AgentFrame":
        return AgentFrame(list(self.x), list(self.y), list(self.vx), list(self.vy))

    def speeds(self) -> List[float]:
        return [math.hypot(vx, vy) for vx, vy in zip(self.vx, self.vy)]


@dataclass(slots=True)
class HazardFrame:
    """Hazard zones ("areas"); each zone carries its own avoidance radius."""

    x: List[float] = field(default_factory=list)
    y: List[float] = field(default_factory=list)
    radius: List[float] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.x)

    def validate(self, name: str = "hazards") -> None:
        if len(self.x) != len(self.y):
            raise FrameShapeError(
                f"{name} frame has mismatched position lengths: x={len(self.x)}, y={len(self.y)}"
            )
        if len(self.radius) != len(self.x):
            raise FrameShapeError(
                f"{name} frame has {len(self.radius)} radii for {len(self.x)} zones"
            )

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, float]]) -> "HazardFrame":
        frame = cls()
        for record in records:
            frame.x.append(float(record["x"]))
            frame.y.append(float(record["y"]))
            frame.radius.append(float(record["radius"]))
        return frame

    def to_records(self) -> List[Dict[str, Any]]:
        return [
            {"x": x, "y": y, "radius": radius}
            for x, y, radius in zip(self.x, self.y, self.radius)
        ]

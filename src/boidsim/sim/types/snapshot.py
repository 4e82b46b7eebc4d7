from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List

from .metrics import TickMetrics


@dataclass(slots=True)
class Snapshot:
    tick: int
    metrics: TickMetrics
    boids: List[Dict[str, float]]
    predators: List[Dict[str, float]]
    hazards: List[Dict[str, float]]
    world: "SnapshotWorld"
    metadata: "SnapshotMetadata"


@dataclass(slots=True)
class SnapshotWorld:
    width: float
    height: float


@dataclass(slots=True)
class SnapshotMetadata:
    seed: int
    variant: str
    config_version: str

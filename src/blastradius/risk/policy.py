"""Aggregate risk scoring policies for a blast radius."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from blastradius.risk.models import ImpactedFile


class RiskPolicy(Protocol):
    """Combines the target's own risk with its impacted files into one score."""

    def total_risk(self, base_score: int, impacted_files: Sequence[ImpactedFile]) -> int:
        ...


class DefaultRiskPolicy:
    """Target risk plus a breadth bonus and a proximity bonus, capped at 100.

    breadth   = min(breadth_cap, breadth_per_file * impacted files)
    proximity = min(proximity_cap, proximity_per_file * files within near_distance)
    """

    def __init__(
        self,
        breadth_per_file: int = 2,
        breadth_cap: int = 20,
        proximity_per_file: int = 3,
        proximity_cap: int = 15,
        near_distance: int = 2,
    ) -> None:
        self.breadth_per_file = breadth_per_file
        self.breadth_cap = breadth_cap
        self.proximity_per_file = proximity_per_file
        self.proximity_cap = proximity_cap
        self.near_distance = near_distance

    def total_risk(self, base_score: int, impacted_files: Sequence[ImpactedFile]) -> int:
        breadth = min(self.breadth_cap, self.breadth_per_file * len(impacted_files))
        close = sum(1 for f in impacted_files if f.distance <= self.near_distance)
        proximity = min(self.proximity_cap, self.proximity_per_file * close)
        return min(100, base_score + breadth + proximity)

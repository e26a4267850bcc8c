"""Result model of a blast radius analysis."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, Field

from blastradius.graph.models import DependencyEdge
from blastradius.risk.models import ImpactedFile, RiskLevel, RiskTag


class BlastRadiusResult(BaseModel):
    """Everything affected by changing `target_symbol` in `target_file`."""

    target_file: str
    target_symbol: str
    impacted_files: list[ImpactedFile] = Field(default_factory=list)  # by distance
    total_risk_score: int = Field(default=0, ge=0, le=100)
    risk_tags: set[RiskTag] = Field(default_factory=set)
    dependency_chain: list[DependencyEdge] = Field(default_factory=list)
    analyzed_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def impacted_count(self) -> int:
        return len(self.impacted_files)

    def files_at_level(self, level: RiskLevel) -> list[ImpactedFile]:
        return [f for f in self.impacted_files if f.risk_level == level]

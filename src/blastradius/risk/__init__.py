"""Risk tagging and scoring."""

from blastradius.risk.models import ImpactedFile, RiskLevel, RiskTag, score_to_level
from blastradius.risk.policy import DefaultRiskPolicy, RiskPolicy
from blastradius.risk.tagger import RiskTagger

__all__ = [
    "DefaultRiskPolicy",
    "ImpactedFile",
    "RiskLevel",
    "RiskPolicy",
    "RiskTag",
    "RiskTagger",
    "score_to_level",
]

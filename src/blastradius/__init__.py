"""blastradius - estimate the impact and risk of changing TypeScript/JavaScript code."""

__version__ = "0.1.0"

from blastradius.engine import BlastRadiusEngine, BlastRadiusResult  # noqa: E402
from blastradius.risk import ImpactedFile, RiskLevel, RiskTag, RiskTagger  # noqa: E402

__all__ = [
    "BlastRadiusEngine",
    "BlastRadiusResult",
    "ImpactedFile",
    "RiskLevel",
    "RiskTag",
    "RiskTagger",
    "__version__",
]

"""Heuristic risk tagging of files and symbols."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from blastradius.config import RiskConfig
from blastradius.exceptions import ConfigError
from blastradius.risk.models import (
    RISK_PATH_PATTERNS,
    RISK_SYMBOL_KEYWORDS,
    RISK_TAG_WEIGHTS,
    ImpactedFile,
    RiskLevel,
    RiskTag,
    score_to_level,
)

# Flat surcharge for every distinct tag beyond the dominant one
EXTRA_TAG_SURCHARGE = 3
# Points of risk lost per hop away from the change
DISTANCE_DECAY = 5


class RiskTagger:
    """Assigns risk tags from path patterns and symbol keywords, and scores them.

    Stateless apart from its lookup tables, which default to the built-in
    ones and can be overridden per instance.
    """

    def __init__(
        self,
        weights: Mapping[RiskTag, int] | None = None,
        path_patterns: Mapping[str, RiskTag] | None = None,
        symbol_keywords: Mapping[str, RiskTag] | None = None,
    ) -> None:
        self.weights = dict(RISK_TAG_WEIGHTS if weights is None else weights)
        self.path_patterns = dict(RISK_PATH_PATTERNS if path_patterns is None else path_patterns)
        self.symbol_keywords = dict(
            RISK_SYMBOL_KEYWORDS if symbol_keywords is None else symbol_keywords
        )

    @classmethod
    def from_config(cls, config: RiskConfig) -> RiskTagger:
        """Build a tagger with the config's overrides merged over the defaults."""
        weights = dict(RISK_TAG_WEIGHTS)
        for tag, weight in config.weights.items():
            weights[_to_tag(tag)] = weight

        path_patterns = dict(RISK_PATH_PATTERNS)
        for pattern, tag in config.path_patterns.items():
            path_patterns[pattern.lower()] = _to_tag(tag)

        symbol_keywords = dict(RISK_SYMBOL_KEYWORDS)
        for keyword, tag in config.symbol_keywords.items():
            symbol_keywords[keyword.lower()] = _to_tag(tag)

        return cls(weights, path_patterns, symbol_keywords)

    def tag_file(self, file_path: str) -> set[RiskTag]:
        """Tags whose path pattern occurs in the normalized file path."""
        normalized = file_path.lower().replace("\\", "/")
        return {tag for pattern, tag in self.path_patterns.items() if pattern in normalized}

    def tag_symbols(self, symbol_names: Iterable[str]) -> set[RiskTag]:
        """Tags whose keyword occurs in any of the lowercased symbol names."""
        tags: set[RiskTag] = set()
        for name in symbol_names:
            lower = name.lower()
            for keyword, tag in self.symbol_keywords.items():
                if keyword in lower:
                    tags.add(tag)
        return tags

    def tag_all(self, file_path: str, symbol_names: Iterable[str]) -> set[RiskTag]:
        return self.tag_file(file_path) | self.tag_symbols(symbol_names)

    def calculate_risk_score(self, tags: Iterable[RiskTag]) -> int:
        """Score a tag set: the heaviest tag plus a surcharge per extra tag, capped at 100."""
        tags = set(tags)
        if not tags:
            return 0
        max_weight = max(self.weights.get(tag, 0) for tag in tags)
        return min(100, max_weight + EXTRA_TAG_SURCHARGE * (len(tags) - 1))

    @staticmethod
    def adjust_for_distance(score: int, distance: int) -> int:
        return max(0, score - DISTANCE_DECAY * distance)

    @staticmethod
    def score_to_level(score: int) -> RiskLevel:
        return score_to_level(score)

    def enrich_impacted_files(self, files: Iterable[Mapping]) -> list[ImpactedFile]:
        """Attach risk tags and a distance-adjusted risk level to each entry.

        Args:
            files: Mappings with ``path``, ``symbols`` and ``distance`` keys.
        """
        enriched = []
        for entry in files:
            symbols = list(entry.get("symbols", []))
            distance = entry["distance"]
            tags = self.tag_all(entry["path"], symbols)
            adjusted = self.adjust_for_distance(self.calculate_risk_score(tags), distance)
            enriched.append(
                ImpactedFile(
                    path=entry["path"],
                    symbols=symbols,
                    risk_level=self.score_to_level(adjusted),
                    distance=distance,
                    risk_tags=tags,
                    risk_score=adjusted,
                )
            )
        return enriched


def _to_tag(value: str | RiskTag) -> RiskTag:
    try:
        return RiskTag(value)
    except ValueError as e:
        valid = ", ".join(t.value for t in RiskTag)
        raise ConfigError(f"Unknown risk tag '{value}' (expected one of: {valid})") from e

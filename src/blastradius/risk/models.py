"""Risk taxonomy: tags, levels and the tables used to assign them."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class RiskTag(str, Enum):
    """Categories of risky code, assigned from naming patterns."""

    AUTH = "auth"
    DATABASE = "database"
    VALIDATION = "validation"
    API = "api"
    STATE = "state"
    SECURITY = "security"
    PAYMENT = "payment"
    CONFIG = "config"
    MIGRATION = "migration"
    TEST = "test"


class RiskLevel(str, Enum):
    """Coarse risk classification of an impacted file."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ImpactedFile(BaseModel):
    """A file affected by a change, with its distance and risk assessment."""

    path: str
    symbols: list[str] = Field(default_factory=list)
    risk_level: RiskLevel = RiskLevel.LOW
    distance: int = Field(ge=0)
    risk_tags: set[RiskTag] = Field(default_factory=set)
    risk_score: int = 0  # distance-adjusted score behind risk_level


# Base weight of each tag (0-100)
RISK_TAG_WEIGHTS: dict[RiskTag, int] = {
    RiskTag.SECURITY: 95,
    RiskTag.PAYMENT: 95,
    RiskTag.AUTH: 90,
    RiskTag.DATABASE: 85,
    RiskTag.MIGRATION: 80,
    RiskTag.API: 70,
    RiskTag.VALIDATION: 65,
    RiskTag.STATE: 60,
    RiskTag.CONFIG: 50,
    RiskTag.TEST: 20,
}

# Substrings of a lowercased, forward-slash path
RISK_PATH_PATTERNS: dict[str, RiskTag] = {
    "auth": RiskTag.AUTH,
    "login": RiskTag.AUTH,
    "session": RiskTag.AUTH,
    "token": RiskTag.AUTH,
    "db": RiskTag.DATABASE,
    "database": RiskTag.DATABASE,
    "repository": RiskTag.DATABASE,
    "migration": RiskTag.MIGRATION,
    "schema": RiskTag.DATABASE,
    "prisma": RiskTag.DATABASE,
    "valid": RiskTag.VALIDATION,
    "sanitiz": RiskTag.VALIDATION,
    "api": RiskTag.API,
    "route": RiskTag.API,
    "endpoint": RiskTag.API,
    "controller": RiskTag.API,
    "state": RiskTag.STATE,
    "store": RiskTag.STATE,
    "redux": RiskTag.STATE,
    "context": RiskTag.STATE,
    "security": RiskTag.SECURITY,
    "encrypt": RiskTag.SECURITY,
    "permission": RiskTag.SECURITY,
    "payment": RiskTag.PAYMENT,
    "billing": RiskTag.PAYMENT,
    "stripe": RiskTag.PAYMENT,
    "config": RiskTag.CONFIG,
    "env": RiskTag.CONFIG,
    "setting": RiskTag.CONFIG,
    "test": RiskTag.TEST,
    "spec": RiskTag.TEST,
    "__test__": RiskTag.TEST,
}

# Substrings of a lowercased symbol name
RISK_SYMBOL_KEYWORDS: dict[str, RiskTag] = {
    "auth": RiskTag.AUTH,
    "login": RiskTag.AUTH,
    "password": RiskTag.AUTH,
    "token": RiskTag.AUTH,
    "session": RiskTag.AUTH,
    "query": RiskTag.DATABASE,
    "insert": RiskTag.DATABASE,
    "update": RiskTag.DATABASE,
    "delete": RiskTag.DATABASE,
    "schema": RiskTag.DATABASE,
    "validate": RiskTag.VALIDATION,
    "sanitize": RiskTag.VALIDATION,
    "parse": RiskTag.VALIDATION,
    "fetch": RiskTag.API,
    "request": RiskTag.API,
    "response": RiskTag.API,
    "endpoint": RiskTag.API,
    "state": RiskTag.STATE,
    "dispatch": RiskTag.STATE,
    "reducer": RiskTag.STATE,
    "encrypt": RiskTag.SECURITY,
    "decrypt": RiskTag.SECURITY,
    "hash": RiskTag.SECURITY,
    "permission": RiskTag.SECURITY,
    "payment": RiskTag.PAYMENT,
    "charge": RiskTag.PAYMENT,
    "config": RiskTag.CONFIG,
    "migrate": RiskTag.MIGRATION,
}

# Lower bounds of each level, highest first
RISK_LEVEL_THRESHOLDS: tuple[tuple[int, RiskLevel], ...] = (
    (80, RiskLevel.CRITICAL),
    (60, RiskLevel.HIGH),
    (40, RiskLevel.MEDIUM),
)


def score_to_level(score: int) -> RiskLevel:
    """Convert a 0-100 risk score to a risk level."""
    for threshold, level in RISK_LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return RiskLevel.LOW

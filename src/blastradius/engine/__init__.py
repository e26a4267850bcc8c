"""Blast radius analysis engine."""

from blastradius.engine.blast_radius import BlastRadiusEngine
from blastradius.engine.models import BlastRadiusResult

__all__ = ["BlastRadiusEngine", "BlastRadiusResult"]

"""Report rendering for blast radius results."""

from blastradius.report.markdown import render_blast_radius

__all__ = ["render_blast_radius"]

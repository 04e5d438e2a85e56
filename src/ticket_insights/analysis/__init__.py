"""Ticket analysis.

`TicketAnalyzer` composes one mixin per analysis pass.
"""

from .analyzer import TicketAnalyzer
from .risks import bucket_risk, compute_overall_risk

__all__ = ["TicketAnalyzer", "bucket_risk", "compute_overall_risk"]

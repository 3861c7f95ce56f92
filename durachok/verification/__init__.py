"""
Verification tools for the Durak engine.
"""

from durachok.verification.statistics import ShuffleReport, analyze_shuffle

__all__ = ["ShuffleReport", "analyze_shuffle"]

"""
durachok: a deterministic Durak card game engine.
"""

__version__ = "0.1.0"

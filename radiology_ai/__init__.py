"""
AI-assisted radiology analysis view.

Fetches per-class severity predictions for a radiograph, ranks and
classifies them, and keeps the table, heatmap and radar views in sync.
"""

__version__ = "0.1.0"

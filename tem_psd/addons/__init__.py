"""
Add-ons package for TEM PSD analysis.

Provides helper functions for:
- stable label colouring and distance-field display
- CSV export of accepted particle sizes
"""

# ---- Display helpers ----
from .colors import label_color, colorize_labels, distance_display

# ---- CSV export ----
from .csv_ext import write_sizes_csv


__all__ = [
    # display
    "label_color", "colorize_labels", "distance_display",
    # csv
    "write_sizes_csv",
]

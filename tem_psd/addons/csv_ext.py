"""
CSV export of accepted particle sizes.

One row per segment inside the size window: label id, pixel area and
equivalent size, as a UTF-8 CSV file.
"""

from __future__ import annotations
import csv
import logging
import numpy as np

logger = logging.getLogger(__name__)


def write_sizes_csv(path: str, label_map: np.ndarray, labels: np.ndarray, sizes: np.ndarray, unit: str = "nm") -> None:
    """Write (label, area_px, area, size) rows; pixel areas are counted in `label_map`."""
    if len(labels) != len(sizes):
        raise ValueError("labels and sizes must have the same length.")
    labels = np.asarray(labels, dtype=np.int64)
    counts = np.bincount(np.asarray(label_map, dtype=np.int64).ravel(), minlength=int(labels.max(initial=0)) + 1)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        # Header
        writer.writerow(["label", "area_px", f"area_{unit}^2", f"size_{unit}"])
        # Data rows
        for lab, s in zip(labels, sizes):
            writer.writerow([int(lab), int(counts[lab]), float(s) ** 2, float(s)])
    logger.info("Wrote %d particles to %s", len(labels), path)

"""Plain-language summaries of the current dataset."""

from typing import Optional

import numpy as np

from . import config


def source_label(source, file_name=None):
    value = getattr(source, "value", source)
    if value == "normal":
        return f"normal distribution (mean = {config.NORMAL_MEAN:g}, sd = {config.NORMAL_SD:g})"
    if value == "poisson":
        return f"Poisson distribution (lambda = {config.POISSON_RATE:g})"
    if value == "file":
        return f"file {file_name}" if file_name else "uploaded file"
    return "no data"


def describe_dataset(dataset, label: Optional[str] = None):
    if dataset is None or len(dataset) == 0:
        return "No data yet. Generate a distribution or load a file."
    values = np.asarray(dataset, dtype=float)
    sd = float(values.std(ddof=1)) if values.size > 1 else 0.0
    return (
        f"{values.size} values from the {label or 'current source'}: "
        f"mean {values.mean():.3g}, sd {sd:.3g}, "
        f"range {values.min():.3g} to {values.max():.3g}."
    )

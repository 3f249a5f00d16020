"""
Frequency-weighted summary statistics.

Weights are case counts, so W = sum(w) plays the role of n in every
denominator (variance uses W - 1). Moments that need more cases than are
available come back as None rather than NaN.
"""

from __future__ import annotations

from typing import Any
import numpy as np
from numpy.typing import NDArray


def weighted_statistics(
    x: NDArray[np.floating[Any]],
    w: NDArray[np.floating[Any]],
) -> dict[str, float | None]:
    """
    Mean, dispersion, shape and range statistics.

    Skewness and kurtosis use the bias-corrected (SPSS/Excel) estimators
    with their standard errors.
    """
    keys = ("mean", "se_mean", "std", "variance", "skewness", "se_skewness",
            "kurtosis", "se_kurtosis", "range", "minimum", "maximum", "sum")
    W = float(np.sum(w))
    if x.shape[0] == 0 or W == 0.0:
        return {k: None for k in keys}

    mean = float(np.sum(w * x) / W)
    dev = x - mean
    m2 = float(np.sum(w * dev ** 2))
    m3 = float(np.sum(w * dev ** 3))
    m4 = float(np.sum(w * dev ** 4))

    variance = std = se_mean = None
    if W > 1.0:
        variance = m2 / (W - 1.0)
        std = float(np.sqrt(variance))
        se_mean = std / float(np.sqrt(W))

    skewness = se_skewness = None
    if W > 2.0 and std:
        skewness = W * m3 / ((W - 1.0) * (W - 2.0) * std ** 3)
        se_skewness = float(np.sqrt(6.0 * W * (W - 1.0) / ((W - 2.0) * (W + 1.0) * (W + 3.0))))

    kurtosis = se_kurtosis = None
    if W > 3.0 and std:
        kurtosis = (
            (W * (W + 1.0) * m4 - 3.0 * m2 * m2 * (W - 1.0))
            / ((W - 1.0) * (W - 2.0) * (W - 3.0) * variance ** 2)
        )
        se_skew = np.sqrt(6.0 * W * (W - 1.0) / ((W - 2.0) * (W + 1.0) * (W + 3.0)))
        se_kurtosis = float(np.sqrt(4.0 * (W * W - 1.0) * se_skew ** 2 / ((W - 3.0) * (W + 5.0))))

    minimum = float(np.min(x))
    maximum = float(np.max(x))
    return {
        "mean": mean,
        "se_mean": se_mean,
        "std": std,
        "variance": variance,
        "skewness": skewness,
        "se_skewness": se_skewness,
        "kurtosis": kurtosis,
        "se_kurtosis": se_kurtosis,
        "range": maximum - minimum,
        "minimum": minimum,
        "maximum": maximum,
        "sum": float(np.sum(w * x)),
    }

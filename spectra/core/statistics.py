"""统计与中心化工具模块，为所有算法提供均值、协方差及行归一化计算。"""

from __future__ import annotations

import numpy as np


def column_means(matrix: np.ndarray) -> np.ndarray:
    """Arithmetic mean of every field over all records."""

    # 中文说明：输入已在上游校验为无缺失值，因此直接求均值。
    return np.asarray(matrix, dtype=float).mean(axis=0)


def center(matrix: np.ndarray, means: np.ndarray) -> np.ndarray:
    """Subtract ``means`` from every record, returning a new matrix."""

    data = np.asarray(matrix, dtype=float)
    means = np.asarray(means, dtype=float)
    if data.shape[1] != means.shape[0]:
        raise ValueError(f"Cannot center {data.shape[1]} field(s) with {means.shape[0]} mean(s)")
    return data - means


def covariance_matrix(centered: np.ndarray) -> np.ndarray:
    """Sample covariance of already centered data (fields x fields).

    中文说明：采用无偏估计（除以 n-1）；仅有一条记录时退化为除以 n。
    """
    data = np.asarray(centered, dtype=float)
    n_records = data.shape[0]
    divisor = max(1, n_records - 1)
    return data.T @ data / divisor


def row_normalize(centered: np.ndarray) -> np.ndarray:
    """Scale every row by its root-mean-square as used before ICA whitening.

    中文说明：每行除以 ``sqrt(行平方和) / max(1, 字段数 - 1)``；范数为零的行保持不变。
    """
    data = np.array(centered, dtype=float, copy=True)
    n_fields = data.shape[1]
    rms = np.sqrt(np.sum(data * data, axis=1)) / max(1, n_fields - 1)
    nonzero = rms > 0
    data[nonzero] = data[nonzero] / rms[nonzero, np.newaxis]
    return data


__all__ = ["column_means", "center", "covariance_matrix", "row_normalize"]

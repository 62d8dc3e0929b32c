"""核主成分分析模块，对训练记录的核矩阵做特征分解得到非参数模型。"""

from __future__ import annotations

import logging
import warnings
from typing import Any, Mapping, Optional, Union

import numpy as np

from ..core.cancellation import StopCheck, as_stop_check
from ..core.components import components_from_columns, rank_components
from ..core.kernels import Kernel, build_kernel
from ..core.selection import ReductionType, SelectionPolicy, resolve_component_count
from ..core.statistics import center, column_means
from ..exceptions import InvalidParameterError, ScalabilityWarning
from ..models.base import DataLike
from ..models.kernel import KernelModel
from .base import BaseTransformation, selection_from_params
from .registry import register_algorithm

logger = logging.getLogger(__name__)

# 中文说明：超过该训练记录数时，核矩阵与应用阶段的开销会显著增加，给出提示。
LARGE_TRAINING_SET = 10_000


@register_algorithm("kernel_pca")
class KernelPCA(BaseTransformation):
    """Kernel Principal Component Analysis.

    中文说明
    -------
    仅用训练均值做中心化（不做白化），构建 ``n x n`` 核矩阵并特征分解，特征向量按
    特征值降序排列。由于核空间中没有有限维基，模型需保存全部训练记录，应用时对每条
    记录需要 ``n`` 次核函数计算。不支持按累计比例阈值选择成分，成分数量在拟合时确定。

    Parameters
    ----------
    kernel_type:
        Registered kernel name (``dot``, ``radial``, ``polynomial``, ``neural``,
        ``anova``, ``epanechnikov``, ``multiquadric``) or a ``Kernel`` instance.
    kernel_params:
        Keyword arguments of the kernel, e.g. ``{"gamma": 0.5}``.
    """

    display_name = "KernelPCA"

    def __init__(
        self,
        kernel_type: Union[str, Kernel] = "radial",
        kernel_params: Optional[Mapping[str, Any]] = None,
        selection: Optional[SelectionPolicy] = None,
        dimensionality_reduction: Optional[str] = None,
        number_of_components: Optional[int] = None,
        keep_attributes: bool = False,
    ) -> None:
        super().__init__(
            kernel_type=kernel_type,
            kernel_params=kernel_params,
            selection=selection,
            dimensionality_reduction=dimensionality_reduction,
            number_of_components=number_of_components,
            keep_attributes=keep_attributes,
        )
        if isinstance(kernel_type, Kernel):
            self.kernel = kernel_type
        else:
            self.kernel = build_kernel(kernel_type, **dict(kernel_params or {}))
        self.selection = selection_from_params(selection, dimensionality_reduction, number_of_components, None)
        if self.selection.reduction is ReductionType.THRESHOLD:
            raise InvalidParameterError("KernelPCA supports only 'none' or 'fixed' dimensionality reduction")
        self.keep_attributes = keep_attributes

    def fit(self, data: DataLike, check_for_stop: Optional[StopCheck] = None) -> KernelModel:
        """Build and decompose the Gram matrix of the centered training rows."""

        stop = as_stop_check(check_for_stop)
        dataset = self._prepare(data)
        fields = dataset.regular_columns
        matrix = dataset.regular_matrix(fields)
        n_samples = matrix.shape[0]
        if n_samples > LARGE_TRAINING_SET:
            warnings.warn(
                f"KernelPCA keeps all {n_samples} training rows and builds a {n_samples} x {n_samples} "
                "kernel matrix; fitting and applying may need a lot of memory and time.",
                ScalabilityWarning,
                stacklevel=2,
            )

        means = column_means(matrix)
        centered = center(matrix, means)

        gram = np.empty((n_samples, n_samples), dtype=float)
        block = max(1, 2 ** 22 // max(1, n_samples))
        for start in range(0, n_samples, block):
            stop()
            end = min(start + block, n_samples)
            gram[start:end] = self.kernel(centered[start:end], centered)

        stop()
        eigenvalues, eigenvectors = np.linalg.eigh(gram)
        ranked = rank_components(components_from_columns(eigenvectors, eigenvalues))
        count = resolve_component_count(self.selection, [], len(ranked), supports_threshold=False)
        logger.info(
            "KernelPCA (%s) fitted on %d record(s); keeping %d of %d component(s)",
            self.kernel.describe(),
            n_samples,
            count,
            len(ranked),
        )

        return KernelModel(
            fields,
            means,
            centered,
            self.kernel,
            ranked[:count],
            prefix="kpc",
            selection=SelectionPolicy.keep_all(),
            keep_attributes=self.keep_attributes,
        )


__all__ = ["KernelPCA", "LARGE_TRAINING_SET"]

"""主成分分析模块，基于协方差矩阵特征分解提取并排序主成分。"""

from __future__ import annotations

import logging
from typing import Optional

import numpy as np

from ..core.cancellation import StopCheck, as_stop_check
from ..core.components import components_from_columns, rank_components
from ..core.selection import SelectionPolicy
from ..core.statistics import center, column_means, covariance_matrix
from ..models.base import DataLike
from ..models.linear import LinearModel
from .base import BaseTransformation, selection_from_params
from .registry import register_algorithm

logger = logging.getLogger(__name__)


@register_algorithm("pca")
class PCA(BaseTransformation):
    """Principal Component Analysis via covariance eigen-decomposition.

    中文说明
    -------
    1. 计算中心化数据的字段协方差矩阵；
    2. 特征分解，每对特征向量 / 特征值构成一个成分；
    3. 按特征值降序排序，数值噪声导致的负值或接近零的特征值原样保留；
    4. 模型在应用阶段用训练均值中心化并投影到前 ``k`` 个成分。

    Parameters
    ----------
    selection:
        Selection policy; alternatively give ``dimensionality_reduction``
        (``none|fixed|threshold``) with ``number_of_components`` or
        ``variance_threshold``.
    keep_attributes:
        Keep the original regular fields next to ``pc_i`` in the output.
    """

    display_name = "PCA"

    def __init__(
        self,
        selection: Optional[SelectionPolicy] = None,
        dimensionality_reduction: Optional[str] = None,
        number_of_components: Optional[int] = None,
        variance_threshold: Optional[float] = None,
        keep_attributes: bool = False,
    ) -> None:
        super().__init__(
            selection=selection,
            dimensionality_reduction=dimensionality_reduction,
            number_of_components=number_of_components,
            variance_threshold=variance_threshold,
            keep_attributes=keep_attributes,
        )
        self.selection = selection_from_params(
            selection, dimensionality_reduction, number_of_components, variance_threshold
        )
        self.keep_attributes = keep_attributes

    def fit(self, data: DataLike, check_for_stop: Optional[StopCheck] = None) -> LinearModel:
        """Fit PCA on the regular fields of ``data``."""

        stop = as_stop_check(check_for_stop)
        dataset = self._prepare(data)
        fields = dataset.regular_columns
        matrix = dataset.regular_matrix(fields)

        means = column_means(matrix)
        covariance = covariance_matrix(center(matrix, means))
        stop()
        # 中文说明：协方差矩阵对称，使用 eigh 获得实数特征值与正交特征向量。
        eigenvalues, eigenvectors = np.linalg.eigh(covariance)
        components = rank_components(components_from_columns(eigenvectors, eigenvalues))
        logger.info(
            "PCA fitted on %d record(s) x %d field(s); leading eigenvalue %.6g",
            matrix.shape[0],
            matrix.shape[1],
            components[0].importance if components else float("nan"),
        )

        model = LinearModel(
            fields,
            means,
            components,
            prefix="pc",
            selection=self.selection,
            keep_attributes=self.keep_attributes,
        )
        # 中文说明：提前解析一次成分数量，使数量超限的警告在拟合阶段即可发出。
        model.resolve_count()
        return model


__all__ = ["PCA"]

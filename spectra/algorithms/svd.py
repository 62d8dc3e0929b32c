"""奇异值分解降维模块，以缩放后的右奇异向量构建投影基。"""

from __future__ import annotations

import logging
import warnings
from typing import Optional

import numpy as np

from ..core.cancellation import StopCheck, as_stop_check
from ..core.components import ComponentVector, rank_components
from ..core.selection import SelectionPolicy
from ..exceptions import DegenerateComponentWarning
from ..models.base import DataLike
from ..models.linear import LinearModel
from .base import BaseTransformation, selection_from_params
from .registry import register_algorithm

logger = logging.getLogger(__name__)


@register_algorithm("svd")
class SVD(BaseTransformation):
    """Dimensionality reduction by Singular Value Decomposition.

    中文说明
    -------
    对 **未中心化** 的数据矩阵（记录 x 字段）做分解 ``U·S·Vᵗ``。第 ``i`` 列右奇异向量
    除以对应奇异值后作为一个成分，奇异值本身（而非平方）作为重要性。
    与 PCA 不同，拟合与应用阶段都不减去均值，这一差异是有意保留的。
    """

    display_name = "SVD"

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
        """Fit the SVD basis on the raw regular fields of ``data``."""

        stop = as_stop_check(check_for_stop)
        dataset = self._prepare(data)
        fields = dataset.regular_columns
        matrix = dataset.regular_matrix(fields)
        stop()

        # 中文说明：只需要右奇异向量与奇异值，使用精简分解。
        _, singular_values, vt = np.linalg.svd(matrix, full_matrices=False)
        components = []
        degenerate = 0
        for i, value in enumerate(singular_values):
            if value > 0.0:
                weights = vt[i] / value
            else:
                weights = np.zeros(vt.shape[1])
                degenerate += 1
            components.append(ComponentVector(weights, value))
        if degenerate:
            warnings.warn(
                f"{degenerate} singular value(s) are zero; the matching components project to 0.",
                DegenerateComponentWarning,
                stacklevel=2,
            )
        # 中文说明：标准 SVD 已按奇异值降序输出，这里的稳定排序不会改变顺序。
        components = rank_components(components)
        logger.info(
            "SVD fitted on %d record(s) x %d field(s); %d singular value(s)",
            matrix.shape[0],
            matrix.shape[1],
            len(components),
        )

        model = LinearModel(
            fields,
            None,
            components,
            prefix="svd",
            selection=self.selection,
            keep_attributes=self.keep_attributes,
        )
        model.resolve_count()
        return model


__all__ = ["SVD"]

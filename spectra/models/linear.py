"""线性变换模型模块，服务于 PCA、SVD、FastICA 与 GHA 的有限维基投影。"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..core.components import ComponentVector
from ..core.selection import SelectionPolicy
from ..core.statistics import row_normalize
from .base import TransformationModel


class LinearModel(TransformationModel):
    """Finite-basis model: ``output_i = sum_j components[i].weights[j] * x_j``.

    中文说明
    -------
    ``x`` 为按训练均值中心化后的记录（``means`` 为 ``None`` 时直接使用原值，
    例如 SVD）；``row_norm`` 为真时在投影前对每行做均方根归一化（FastICA）。
    ``report_weights`` 可提供与投影基不同的、用于解释的字段权重（FastICA 的混合矩阵）。
    """

    def __init__(
        self,
        field_names: Sequence[str],
        means: Optional[np.ndarray],
        components: Sequence[ComponentVector],
        prefix: str,
        selection: Optional[SelectionPolicy] = None,
        keep_attributes: bool = False,
        row_norm: bool = False,
        report_weights: Optional[np.ndarray] = None,
        ranked: bool = True,
    ) -> None:
        super().__init__(field_names, means, components, prefix, selection, keep_attributes)
        for component in self.components:
            if len(component) != self.number_of_fields:
                raise ValueError(
                    f"Component has {len(component)} weight(s) but the model has {self.number_of_fields} field(s)"
                )
        self.row_norm = row_norm
        self.report_weights = None if report_weights is None else np.array(report_weights, dtype=float, copy=True)
        # 中文说明：未排序的成分（如独立成分）不支持按累计比例阈值截断。
        self.supports_threshold = ranked
        self._basis = self._stack_basis()

    def _stack_basis(self) -> np.ndarray:
        if not self.components:
            return np.zeros((0, self.number_of_fields))
        return np.vstack([component.weights for component in self.components])

    @property
    def basis(self) -> np.ndarray:
        """Components as rows (components x fields)."""

        return self._basis.copy()

    def _project(self, block: np.ndarray, count: int) -> np.ndarray:
        values = block
        if self.means is not None:
            values = values - self.means
        if self.row_norm:
            values = row_normalize(values)
        return values @ self._basis[:count].T

    def _weight_vector(self, index: int) -> Tuple[pd.Index, np.ndarray]:
        labels = pd.Index(self.field_names, name="field")
        if self.report_weights is not None:
            return labels, self.report_weights[index]
        return labels, self.components[index].weights


__all__ = ["LinearModel"]

"""核主成分模型模块，保存全部训练记录以在应用阶段计算核相似度。"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from ..core.components import ComponentVector
from ..core.kernels import Kernel
from ..core.selection import SelectionPolicy
from .base import TransformationModel


class KernelModel(TransformationModel):
    """Non-parametric Kernel PCA model.

    中文说明
    -------
    核空间中不存在有限维的基，因此模型必须保存全部（中心化后的）训练记录。
    对新记录 ``x``：``output_j = sum_i eigenvectors[j][i] * k(x, train_i)``。

    Applying the model costs one kernel evaluation per training row for every
    record, i.e. ``O(n)`` per record and ``O(m * n)`` for ``m`` records, and
    the model's size grows linearly with the training set.
    """

    supports_threshold = False

    def __init__(
        self,
        field_names: Sequence[str],
        means: np.ndarray,
        training_rows: np.ndarray,
        kernel: Kernel,
        components: Sequence[ComponentVector],
        prefix: str = "kpc",
        selection: Optional[SelectionPolicy] = None,
        keep_attributes: bool = False,
    ) -> None:
        super().__init__(field_names, means, components, prefix, selection, keep_attributes)
        self.training_rows = np.array(training_rows, dtype=float, copy=True)
        self.training_rows.setflags(write=False)
        self.kernel = kernel
        n_rows = self.training_rows.shape[0]
        for component in self.components:
            if len(component) != n_rows:
                raise ValueError(f"Eigenvector has {len(component)} entries but {n_rows} training rows are stored")
        self._eigenvectors = (
            np.vstack([component.weights for component in self.components])
            if self.components
            else np.zeros((0, n_rows))
        )
        # 中文说明：按训练集规模缩小每块记录数，使相似度块的内存占用保持有界。
        self.block_size = max(1, min(TransformationModel.block_size, 2 ** 22 // max(1, n_rows)))

    @property
    def number_of_training_rows(self) -> int:
        return int(self.training_rows.shape[0])

    def _project(self, block: np.ndarray, count: int) -> np.ndarray:
        centered = block - self.means
        similarities = self.kernel(centered, self.training_rows)
        return similarities @ self._eigenvectors[:count].T

    def _weight_vector(self, index: int) -> Tuple[pd.Index, np.ndarray]:
        # 中文说明：核成分没有字段空间中的权重，这里报告其在各训练记录上的展开系数。
        labels = pd.RangeIndex(self.number_of_training_rows, name="training_row")
        return labels, self.components[index].weights


__all__ = ["KernelModel"]

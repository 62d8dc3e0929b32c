"""广义 Hebbian 算法模块，以随机在线更新迭代逼近主成分。"""

from __future__ import annotations

import logging
import warnings
from typing import Optional

import numpy as np

from ..core.cancellation import StopCheck, as_stop_check
from ..core.components import ComponentVector, rank_components
from ..core.selection import SelectionPolicy
from ..core.statistics import center, column_means, covariance_matrix
from ..exceptions import ComponentCountWarning, InvalidParameterError
from ..models.base import DataLike
from ..models.linear import LinearModel
from .base import BaseTransformation, iteration_log_interval, selection_from_params
from .registry import register_algorithm

logger = logging.getLogger(__name__)

_DIVERGENCE_HINT = "Please lower the learning rate."


def estimate_eigenvalues(weights: np.ndarray, covariance: np.ndarray) -> np.ndarray:
    """Approximate the eigenvalue belonging to every row of ``weights``.

    中文说明
    -------
    若 ``w`` 是协方差矩阵 ``C`` 的特征向量，则 ``(C·w)_j / w_j`` 对所有 ``j`` 都等于特征值。
    Hebbian 权重只是近似特征向量，因此对每个成分取所有为正的比值的平均值作为估计；
    没有正比值时估计为 0。这是近似值，并非精确特征分解。
    """
    projected = weights @ covariance
    estimates = np.zeros(weights.shape[0])
    for i in range(weights.shape[0]):
        nonzero = weights[i] != 0.0
        ratios = projected[i, nonzero] / weights[i, nonzero]
        positive = ratios[ratios > 0.0]
        if positive.size:
            estimates[i] = float(positive.mean())
    return estimates


@register_algorithm("gha")
class GHA(BaseTransformation):
    """Generalized Hebbian Algorithm, an iterative approximation of PCA.

    中文说明
    -------
    权重矩阵（成分 x 字段）以很小的随机值初始化。每次迭代随机抽取一条中心化记录
    ``x``，计算 ``y = W·x``，并更新
    ``W ← W + η·(y·xᵗ − L·W)``，其中 ``L`` 为 ``y·yᵗ`` 的严格下三角部分（不含对角线），
    从而在线地使成分彼此去相关。第一个成分按纯 Hebbian 规则增长，学习率或迭代次数过大时会发散。
    任一迭代中权重出现 NaN/Inf 即判定发散并报告迭代次数。

    Parameters
    ----------
    number_of_components:
        Number of components to extract; ``-1`` extracts one per field.
    number_of_iterations:
        Number of stochastic updates.
    learning_rate:
        Step size ``η`` (must be positive).
    random_state:
        Seed or ``RandomState`` for initial weights and record sampling.
    selection:
        Default selection policy of the fitted model (``none`` keeps all
        extracted components).
    """

    display_name = "GHA"

    def __init__(
        self,
        number_of_components: int = -1,
        number_of_iterations: int = 10,
        learning_rate: float = 0.01,
        random_state: Optional[object] = None,
        selection: Optional[SelectionPolicy] = None,
        dimensionality_reduction: Optional[str] = None,
        variance_threshold: Optional[float] = None,
        keep_attributes: bool = False,
    ) -> None:
        super().__init__(
            number_of_components=number_of_components,
            number_of_iterations=number_of_iterations,
            learning_rate=learning_rate,
            random_state=random_state,
            selection=selection,
            dimensionality_reduction=dimensionality_reduction,
            variance_threshold=variance_threshold,
            keep_attributes=keep_attributes,
        )
        if number_of_components != -1 and number_of_components < 1:
            raise InvalidParameterError(
                f"number_of_components must be -1 or a positive integer, got {number_of_components}"
            )
        if number_of_iterations < 0:
            raise InvalidParameterError(f"number_of_iterations must be non-negative, got {number_of_iterations}")
        if learning_rate <= 0:
            raise InvalidParameterError(f"learning_rate must be positive, got {learning_rate}")
        # 中文说明：number_of_components 决定提取数量；应用阶段的截断由 selection 或阈值参数给出。
        self.selection = selection_from_params(selection, dimensionality_reduction, None, variance_threshold)
        self.number_of_components = int(number_of_components)
        self.number_of_iterations = int(number_of_iterations)
        self.learning_rate = float(learning_rate)
        self.random_state = random_state
        self.keep_attributes = keep_attributes

    def fit(self, data: DataLike, check_for_stop: Optional[StopCheck] = None) -> LinearModel:
        """Train the Hebbian weights on the regular fields of ``data``."""

        stop = as_stop_check(check_for_stop)
        dataset = self._prepare(data)
        fields = dataset.regular_columns
        matrix = dataset.regular_matrix(fields)
        n_samples, n_fields = matrix.shape

        n_components = n_fields if self.number_of_components == -1 else self.number_of_components
        if n_components > n_fields:
            warnings.warn(
                f"The parameter 'number_of_components' is too large ({n_components}); "
                f"using the {n_fields} available field(s).",
                ComponentCountWarning,
                stacklevel=2,
            )
            n_components = n_fields

        means = column_means(matrix)
        centered = center(matrix, means)

        rng = self._random_state(self.random_state)
        W = rng.random_sample((n_components, n_fields)) * 0.1 - 0.05
        interval = iteration_log_interval(self.number_of_iterations)

        for iteration in range(1, self.number_of_iterations + 1):
            stop()
            x = centered[rng.randint(n_samples)]
            with np.errstate(over="ignore", invalid="ignore"):
                y = W @ x
                W = W + self.learning_rate * (np.outer(y, x) - np.tril(np.outer(y, y), k=-1) @ W)
            self._check_finite(W, iteration, _DIVERGENCE_HINT)
            if iteration % interval == 0:
                logger.debug("GHA iteration %d of %d", iteration, self.number_of_iterations)

        eigenvalues = estimate_eigenvalues(W, covariance_matrix(centered))
        components = rank_components(ComponentVector(W[i], eigenvalues[i]) for i in range(n_components))
        logger.info(
            "GHA trained %d component(s) on %d record(s) x %d field(s) in %d iteration(s)",
            n_components,
            n_samples,
            n_fields,
            self.number_of_iterations,
        )

        model = LinearModel(
            fields,
            means,
            components,
            prefix="pc",
            selection=self.selection,
            keep_attributes=self.keep_attributes,
        )
        model.resolve_count()
        return model


__all__ = ["GHA", "estimate_eigenvalues"]

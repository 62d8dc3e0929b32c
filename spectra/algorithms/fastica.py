"""FastICA 模块，通过不动点迭代估计独立成分（支持逐个提取与并行两种模式）。"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Optional, Tuple

import numpy as np

from ..core.cancellation import StopCheck, as_stop_check
from ..core.components import ComponentVector
from ..core.selection import ReductionType, SelectionPolicy, resolve_component_count
from ..core.statistics import center, column_means, row_normalize
from ..exceptions import InvalidParameterError, PreconditionError
from ..models.base import DataLike
from ..models.linear import LinearModel
from .base import BaseTransformation, iteration_log_interval, selection_from_params
from .registry import register_algorithm

logger = logging.getLogger(__name__)

Nonlinearity = Callable[[np.ndarray, float], Tuple[np.ndarray, np.ndarray]]

ALGORITHM_TYPES = ("deflation", "parallel")

_DIVERGENCE_HINT = "Try a smaller tolerance or fewer components, or enable row normalization."


def _logcosh(u: np.ndarray, alpha: float) -> Tuple[np.ndarray, np.ndarray]:
    """``g(u) = tanh(alpha * u)`` and its derivative."""

    g = np.tanh(alpha * u)
    return g, alpha * (1.0 - g * g)


def _exp(u: np.ndarray, alpha: float) -> Tuple[np.ndarray, np.ndarray]:
    """``g(u) = u * exp(-u^2 / 2)`` and its derivative; ``alpha`` is unused."""

    e = np.exp(-0.5 * u * u)
    return u * e, (1.0 - u * u) * e


# 中文说明：近似负熵所用的非线性函数，键为配置中的 function 取值。
NONLINEARITIES: Dict[str, Nonlinearity] = {
    "logcosh": _logcosh,
    "exp": _exp,
}


def _sym_decorrelation(W: np.ndarray) -> np.ndarray:
    """Symmetric orthogonalisation ``(W Wᵗ)^(-1/2) W`` via an eigen-decomposition."""

    s, u = np.linalg.eigh(W @ W.T)
    with np.errstate(divide="ignore", invalid="ignore"):
        inverse_sqrt = (u * (1.0 / np.sqrt(s))) @ u.T
    return inverse_sqrt @ W


@register_algorithm("fastica")
class FastICA(BaseTransformation):
    """Fast fixed-point Independent Component Analysis.

    中文说明
    -------
    预处理：中心化、可选的行归一化、基于样本协方差 SVD 的白化
    （``K = S^-1/2 · Uᵗ``，截取前 ``number_of_components`` 行）。
    之后在白化空间中以不动点迭代求解解混矩阵 ``W``：

    - ``deflation``：逐个提取成分，每次迭代都对已接受的行做 Gram-Schmidt 正交化；
    - ``parallel``：同时更新整个 ``W``，每次迭代做对称正交化。

    迭代在 ``lim <= tolerance`` 或迭代次数超过 ``max_iteration`` 时停止；
    权重出现 NaN/Inf 时立即报告发散所在的迭代次数。

    Parameters
    ----------
    algorithm_type:
        ``deflation`` or ``parallel``.
    function:
        ``logcosh`` or ``exp``, the form of ``G`` in the neg-entropy approximation.
    alpha:
        Constant in ``[1, 2]`` used by ``logcosh``.
    row_norm:
        Standardise the rows of the centered data beforehand.
    max_iteration:
        Maximum number of fixed-point iterations (per component in deflation mode).
    tolerance:
        Convergence tolerance of the un-mixing matrix.
    random_state:
        Seed or ``RandomState`` for the initial un-mixing matrix.
    """

    display_name = "FastICA"

    def __init__(
        self,
        algorithm_type: str = "deflation",
        function: str = "logcosh",
        alpha: float = 1.0,
        row_norm: bool = False,
        max_iteration: int = 200,
        tolerance: float = 1e-4,
        random_state: Optional[object] = None,
        selection: Optional[SelectionPolicy] = None,
        dimensionality_reduction: Optional[str] = None,
        number_of_components: Optional[int] = None,
        keep_attributes: bool = False,
    ) -> None:
        super().__init__(
            algorithm_type=algorithm_type,
            function=function,
            alpha=alpha,
            row_norm=row_norm,
            max_iteration=max_iteration,
            tolerance=tolerance,
            random_state=random_state,
            selection=selection,
            dimensionality_reduction=dimensionality_reduction,
            number_of_components=number_of_components,
            keep_attributes=keep_attributes,
        )
        if algorithm_type not in ALGORITHM_TYPES:
            raise InvalidParameterError(f"algorithm_type must be one of {ALGORITHM_TYPES}, got {algorithm_type!r}")
        if function not in NONLINEARITIES:
            raise InvalidParameterError(f"function must be one of {sorted(NONLINEARITIES)}, got {function!r}")
        if not 1.0 <= alpha <= 2.0:
            raise InvalidParameterError(f"alpha must lie in [1, 2], got {alpha}")
        if max_iteration < 0:
            raise InvalidParameterError(f"max_iteration must be non-negative, got {max_iteration}")
        if tolerance < 0:
            raise InvalidParameterError(f"tolerance must be non-negative, got {tolerance}")
        self.selection = selection_from_params(selection, dimensionality_reduction, number_of_components, None)
        if self.selection.reduction is ReductionType.THRESHOLD:
            raise InvalidParameterError("FastICA supports only 'none' or 'fixed' dimensionality reduction")
        self.algorithm_type = algorithm_type
        self.function = function
        self.alpha = float(alpha)
        self.row_norm = bool(row_norm)
        self.max_iteration = int(max_iteration)
        self.tolerance = float(tolerance)
        self.random_state = random_state
        self.keep_attributes = keep_attributes

    def fit(self, data: DataLike, check_for_stop: Optional[StopCheck] = None) -> LinearModel:
        """Estimate the un-mixing matrix on the regular fields of ``data``."""

        stop = as_stop_check(check_for_stop)
        dataset = self._prepare(data)
        fields = dataset.regular_columns
        matrix = dataset.regular_matrix(fields)
        n_samples, n_fields = matrix.shape
        n_components = resolve_component_count(self.selection, [], n_fields, supports_threshold=False)

        means = column_means(matrix)
        centered = center(matrix, means)

        rng = self._random_state(self.random_state)
        w_init = rng.random_sample((n_components, n_components)) * 2.0 - 1.0

        if self.row_norm:
            centered = row_normalize(centered)

        X = centered.T
        k_matrix = self._whitening(X, n_samples, n_components)
        whitened = k_matrix @ X

        if self.algorithm_type == "deflation":
            unmixing = self._deflation(whitened, w_init, stop)
        else:
            unmixing = self._parallel(whitened, w_init, stop)

        projection = unmixing @ k_matrix
        # 中文说明：混合矩阵为投影矩阵的伪逆，仅用于报告各字段在成分上的权重。
        mixing = (projection.T @ np.linalg.inv(projection @ projection.T)).T
        sources = projection @ X
        variances = sources.var(axis=1)
        components = [ComponentVector(projection[i], variances[i]) for i in range(n_components)]
        logger.info(
            "FastICA (%s, %s) extracted %d component(s) from %d record(s) x %d field(s)",
            self.algorithm_type,
            self.function,
            n_components,
            n_samples,
            n_fields,
        )

        return LinearModel(
            fields,
            means,
            components,
            prefix="ic",
            selection=SelectionPolicy.keep_all(),
            keep_attributes=self.keep_attributes,
            row_norm=self.row_norm,
            report_weights=mixing,
            ranked=False,
        )

    def _whitening(self, X: np.ndarray, n_samples: int, n_components: int) -> np.ndarray:
        """Whitening matrix ``K`` (components x fields) from the sample covariance."""

        u, singular_values, _ = np.linalg.svd(X @ X.T / n_samples)
        kept = singular_values[:n_components]
        scale = singular_values[0] if singular_values.size else 0.0
        if scale <= 0.0 or np.any(kept <= scale * 1e-12):
            raise PreconditionError(
                "FastICA cannot whiten rank deficient data; reduce number_of_components "
                "or remove linearly dependent fields"
            )
        return (u[:, :n_components] / np.sqrt(kept)).T

    def _deflation(self, X: np.ndarray, w_init: np.ndarray, stop: StopCheck) -> np.ndarray:
        """Extract the rows of ``W`` one at a time."""

        n_components = w_init.shape[0]
        nonlinearity = NONLINEARITIES[self.function]
        interval = iteration_log_interval(self.max_iteration)
        W = np.zeros((n_components, n_components))

        for i in range(n_components):
            accepted = W[:i]
            w = w_init[i].copy()
            w -= accepted.T @ (accepted @ w)
            with np.errstate(divide="ignore", invalid="ignore"):
                w /= np.sqrt(w @ w)
            self._check_finite(w, 0, _DIVERGENCE_HINT)

            lim = 1000.0
            iteration = 1
            while lim > self.tolerance and iteration <= self.max_iteration:
                stop()
                wx = w @ X
                gwx, g_wx = nonlinearity(wx, self.alpha)
                w1 = (X * gwx).mean(axis=1) - g_wx.mean() * w
                w1 -= accepted.T @ (accepted @ w1)
                with np.errstate(divide="ignore", invalid="ignore"):
                    w1 /= np.sqrt(w1 @ w1)
                self._check_finite(w1, iteration, _DIVERGENCE_HINT)

                lim = abs(abs(w1 @ w) - 1.0)
                if iteration % interval == 0 or lim <= self.tolerance:
                    logger.info("Component %d, iteration %d, tolerance = %g", i + 1, iteration, lim)
                iteration += 1
                w = w1

            if lim > self.tolerance:
                logger.warning(
                    "Component %d did not converge within %d iteration(s) (tolerance = %g)",
                    i + 1,
                    self.max_iteration,
                    lim,
                )
            W[i] = w
            stop()
        return W

    def _parallel(self, X: np.ndarray, w_init: np.ndarray, stop: StopCheck) -> np.ndarray:
        """Update the whole ``W`` jointly with symmetric orthogonalisation."""

        n_samples = X.shape[1]
        nonlinearity = NONLINEARITIES[self.function]
        interval = iteration_log_interval(self.max_iteration)

        W = _sym_decorrelation(w_init)
        self._check_finite(W, 0, _DIVERGENCE_HINT)

        lim = 1000.0
        iteration = 1
        while lim > self.tolerance and iteration <= self.max_iteration:
            stop()
            wx = W @ X
            gwx, g_wx = nonlinearity(wx, self.alpha)
            # 中文说明：按记录数取平均，与逐个提取模式使用同一期望。
            W1 = gwx @ X.T / n_samples - g_wx.mean(axis=1)[:, np.newaxis] * W
            W1 = _sym_decorrelation(W1)
            self._check_finite(W1, iteration, _DIVERGENCE_HINT)

            lim = float(np.max(np.abs(np.abs(np.diag(W1 @ W.T)) - 1.0)))
            W = W1
            if iteration % interval == 0 or lim <= self.tolerance:
                logger.info("Iteration %d, tolerance = %g", iteration, lim)
            iteration += 1

        if lim > self.tolerance:
            logger.warning("FastICA did not converge within %d iteration(s) (tolerance = %g)", self.max_iteration, lim)
        return W


__all__ = ["FastICA", "NONLINEARITIES", "ALGORITHM_TYPES"]

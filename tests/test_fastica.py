"""FastICA 测试模块，验证源信号分离、解混矩阵正交性、可复现性与参数校验。"""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from spectra.algorithms.fastica import FastICA
from spectra.core.selection import SelectionPolicy
from spectra.exceptions import ComponentCountWarning, InvalidParameterError, PreconditionError


@pytest.fixture
def mixed_signals():
    """Two independent non-Gaussian sources mixed into two observed fields.

    中文说明：正弦信号与方波信号经固定混合矩阵线性叠加。
    """

    t = np.linspace(0.0, 8.0, 1000)
    sources = np.column_stack([np.sin(2.0 * t), np.sign(np.sin(3.0 * t))])
    mixing = np.array([[1.0, 1.0], [0.5, 2.0]])
    observed = sources @ mixing.T
    return pd.DataFrame(observed, columns=["x1", "x2"]), sources


def _best_abs_correlations(scores: np.ndarray, sources: np.ndarray) -> np.ndarray:
    corr = np.corrcoef(scores.T, sources.T)[: scores.shape[1], scores.shape[1]:]
    return np.abs(corr).max(axis=0)


@pytest.mark.parametrize("algorithm_type", ["deflation", "parallel"])
def test_fastica_recovers_sources(mixed_signals, algorithm_type: str) -> None:
    """每个源信号都应与某个独立成分高度相关（符号与顺序不定）。"""

    frame, sources = mixed_signals
    model = FastICA(algorithm_type=algorithm_type, random_state=0).fit(frame)
    scores = model.apply(frame)

    assert list(scores.columns) == ["ic_1", "ic_2"]
    assert np.all(_best_abs_correlations(scores.to_numpy(), sources) > 0.95)


@pytest.mark.parametrize("algorithm_type", ["deflation", "parallel"])
def test_fastica_components_are_uncorrelated(mixed_signals, algorithm_type: str) -> None:
    """解混矩阵行正交，因此训练数据上的成分协方差为单位矩阵。"""

    frame, _ = mixed_signals
    scores = FastICA(algorithm_type=algorithm_type, random_state=1).fit(frame).apply(frame).to_numpy()

    np.testing.assert_allclose(np.cov(scores, rowvar=False, bias=True), np.eye(2), atol=1e-6)


def test_fastica_is_deterministic_with_seed(mixed_signals) -> None:
    frame, _ = mixed_signals

    first = FastICA(function="exp", random_state=42).fit(frame).apply(frame)
    second = FastICA(function="exp", random_state=42).fit(frame).apply(frame)

    pd.testing.assert_frame_equal(first, second)


def test_fastica_row_norm_and_mixing_report(mixed_signals) -> None:
    frame, _ = mixed_signals
    model = FastICA(row_norm=True, random_state=0).fit(frame)

    assert model.row_norm is True
    weights = model.component_weights(1)
    assert list(weights.index) == ["x1", "x2"]
    assert model.apply(frame).shape == (1000, 2)


def test_fastica_fixed_components_and_cap(mixed_signals) -> None:
    frame, _ = mixed_signals

    model = FastICA(selection=SelectionPolicy.fixed(1), random_state=0).fit(frame)
    assert list(model.apply(frame).columns) == ["ic_1"]

    with pytest.warns(ComponentCountWarning):
        capped = FastICA(dimensionality_reduction="fixed", number_of_components=5, random_state=0).fit(frame)
    assert capped.number_of_components == 2


def test_fastica_rejects_threshold_and_bad_parameters() -> None:
    with pytest.raises(InvalidParameterError):
        FastICA(selection=SelectionPolicy.threshold(0.9))
    with pytest.raises(InvalidParameterError):
        FastICA(alpha=3.0)
    with pytest.raises(InvalidParameterError):
        FastICA(algorithm_type="symmetric")
    with pytest.raises(InvalidParameterError):
        FastICA(function="cube")


def test_fastica_rank_deficient_data_is_rejected() -> None:
    """字段线性相关时无法白化，应在迭代前报错。"""

    frame = pd.DataFrame({"a": [1.0, 2.0, 3.0, 4.0], "b": [2.0, 4.0, 6.0, 8.0]})
    with pytest.raises(PreconditionError):
        FastICA(random_state=0).fit(frame)


class _CountingCheck:
    """Stop check that only counts how often it is called."""

    def __init__(self) -> None:
        self.calls = 0

    def __call__(self) -> None:
        self.calls += 1


@pytest.mark.parametrize("max_iteration", [0, 1, 3])
def test_fastica_deflation_iteration_cap_is_exact(mixed_signals, max_iteration: int) -> None:
    """容差为 0 时每个成分恰好迭代 max_iteration 次，另加每个成分结束后的一次检查。"""

    frame, _ = mixed_signals
    check = _CountingCheck()
    FastICA(algorithm_type="deflation", max_iteration=max_iteration, tolerance=0.0, random_state=0).fit(
        frame, check_for_stop=check
    )
    assert check.calls == 2 * (max_iteration + 1)


@pytest.mark.parametrize("max_iteration", [0, 1, 3])
def test_fastica_parallel_iteration_cap_is_exact(mixed_signals, max_iteration: int) -> None:
    frame, _ = mixed_signals
    check = _CountingCheck()
    FastICA(algorithm_type="parallel", max_iteration=max_iteration, tolerance=0.0, random_state=0).fit(
        frame, check_for_stop=check
    )
    assert check.calls == max_iteration

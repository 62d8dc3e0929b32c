"""PCA 测试模块，验证排序、正交性、重构、选择策略以及应用阶段的约束。"""

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from spectra.algorithms.pca import PCA
from spectra.core.selection import SelectionPolicy
from spectra.data.dataset import Dataset
from spectra.exceptions import ComponentCountWarning, ShapeMismatchError
from spectra.models.linear import LinearModel


def test_pca_end_to_end_fixed_two_components(correlated_dataset: Dataset) -> None:
    """100 x 4 dataset with FIXED(2) yields pc_1, pc_2 and keeps special fields.

    中文说明：输出仅包含特殊字段与两个主成分，且记录顺序不变。
    """

    transformed, model = PCA(selection=SelectionPolicy.fixed(2)).fit_transform(correlated_dataset)

    assert isinstance(model, LinearModel)
    assert list(transformed.frame.columns) == ["id", "label", "pc_1", "pc_2"]
    assert len(transformed) == 100
    pd.testing.assert_series_equal(transformed.frame["id"], correlated_dataset.frame["id"])
    pd.testing.assert_series_equal(transformed.frame["label"], correlated_dataset.frame["label"])


def test_pca_components_are_ranked_and_orthonormal(correlated_dataset: Dataset) -> None:
    model = PCA().fit(correlated_dataset)

    importances = model.importances
    assert np.all(np.diff(importances) <= 0)
    np.testing.assert_allclose(model.basis @ model.basis.T, np.eye(4), atol=1e-10)

    cumulative = model.cumulative_proportions()
    assert np.all(np.diff(cumulative) >= -1e-12)
    assert cumulative[-1] == pytest.approx(1.0)


def test_pca_eigenvalues_match_sample_covariance(correlated_dataset: Dataset) -> None:
    """特征值应等于以 n-1 为分母的样本协方差矩阵的特征值。"""

    model = PCA().fit(correlated_dataset)
    matrix = correlated_dataset.regular_matrix()
    expected = np.sort(np.linalg.eigvalsh(np.cov(matrix, rowvar=False)))[::-1]
    np.testing.assert_allclose(model.importances, expected, rtol=1e-8, atol=1e-10)


def test_pca_full_reconstruction(correlated_dataset: Dataset) -> None:
    """使用全部成分时，均值加上各成分的加权和可以还原原始记录。"""

    model = PCA().fit(correlated_dataset)
    transformed = model.apply(correlated_dataset)

    scores = transformed.frame[model.component_names(4)].to_numpy()
    reconstructed = model.means + scores @ model.basis
    np.testing.assert_allclose(reconstructed, correlated_dataset.regular_matrix(), rtol=1e-6, atol=1e-8)


def test_pca_apply_is_idempotent(correlated_dataset: Dataset) -> None:
    model = PCA(dimensionality_reduction="fixed", number_of_components=2).fit(correlated_dataset)

    first = model.apply(correlated_dataset)
    second = model.apply(correlated_dataset)

    pd.testing.assert_frame_equal(first.frame, second.frame)


def test_pca_apply_does_not_modify_input(correlated_dataset: Dataset) -> None:
    original = correlated_dataset.frame.copy()
    PCA().fit_transform(correlated_dataset)
    pd.testing.assert_frame_equal(correlated_dataset.frame, original)


def test_pca_variance_threshold_selection(correlated_dataset: Dataset) -> None:
    """两个潜在因子解释了几乎全部方差，阈值 0.95 时保留不超过两个成分。"""

    model = PCA(selection=SelectionPolicy.threshold(0.95)).fit(correlated_dataset)
    transformed = model.apply(correlated_dataset)

    generated = [column for column in transformed.frame.columns if column.startswith("pc_")]
    assert 1 <= len(generated) <= 2


def test_pca_runtime_policy_override(correlated_dataset: Dataset) -> None:
    """应用时传入的策略只作用于本次调用；set_selection 修改模型默认值。"""

    model = PCA().fit(correlated_dataset)

    narrowed = model.apply(correlated_dataset, policy=SelectionPolicy.fixed(1))
    assert [c for c in narrowed.frame.columns if c.startswith("pc_")] == ["pc_1"]

    full = model.apply(correlated_dataset)
    assert [c for c in full.frame.columns if c.startswith("pc_")] == ["pc_1", "pc_2", "pc_3", "pc_4"]

    model.set_selection(SelectionPolicy.fixed(3))
    assert model.resolve_count() == 3


def test_pca_fixed_count_above_fields_warns(correlated_dataset: Dataset) -> None:
    with pytest.warns(ComponentCountWarning):
        model = PCA(selection=SelectionPolicy.fixed(10)).fit(correlated_dataset)
    with pytest.warns(ComponentCountWarning):
        transformed = model.apply(correlated_dataset)
    assert "pc_4" in transformed.frame.columns


def test_pca_keep_attributes(correlated_dataset: Dataset) -> None:
    model = PCA(selection=SelectionPolicy.fixed(1), keep_attributes=True).fit(correlated_dataset)
    transformed = model.apply(correlated_dataset)
    assert list(transformed.frame.columns) == ["id", "f1", "f2", "f3", "f4", "label", "pc_1"]

    dropped = model.apply(correlated_dataset, keep_attributes=False)
    assert list(dropped.frame.columns) == ["id", "label", "pc_1"]


def test_pca_apply_rejects_mismatched_header(correlated_dataset: Dataset) -> None:
    """字段数量或名称与训练时不一致时抛出 ShapeMismatchError。"""

    model = PCA().fit(correlated_dataset)

    narrower = Dataset(correlated_dataset.frame.drop(columns=["f4"]), ["id", "label"])
    with pytest.raises(ShapeMismatchError) as excinfo:
        model.apply(narrower)
    assert excinfo.value.expected == 4
    assert excinfo.value.actual == 3

    renamed = Dataset(correlated_dataset.frame.rename(columns={"f4": "other"}), ["id", "label"])
    with pytest.raises(ShapeMismatchError):
        model.apply(renamed)


def test_pca_apply_accepts_reordered_fields(correlated_dataset: Dataset) -> None:
    model = PCA().fit(correlated_dataset)
    frame = correlated_dataset.frame[["id", "f3", "f1", "label", "f4", "f2"]]

    reordered = model.apply(Dataset(frame, ["id", "label"]))
    expected = model.apply(correlated_dataset)

    pd.testing.assert_frame_equal(
        reordered.frame[model.component_names(4)], expected.frame[model.component_names(4)]
    )


def test_pca_accepts_plain_dataframe() -> None:
    """直接传入 DataFrame 时所有列都是常规字段，返回值也是 DataFrame。"""

    frame = pd.DataFrame({"a": [1.0, 2.0, 3.0, 4.0], "b": [2.0, 4.1, 5.9, 8.2]})
    model = PCA().fit(frame)
    result = model.apply(frame)

    assert isinstance(result, pd.DataFrame)
    assert list(result.columns) == ["pc_1", "pc_2"]


def test_component_weights_report_is_clamped(correlated_dataset: Dataset) -> None:
    model = PCA().fit(correlated_dataset)

    weights = model.component_weights(1)
    assert list(weights.index) == ["f1", "f2", "f3", "f4"]
    assert weights.name == "pc_1"

    with pytest.warns(ComponentCountWarning):
        last = model.component_weights(9)
    assert last.name == "pc_4"
    assert "PC 1:" in model.describe()


def test_cumulative_table_columns(correlated_dataset: Dataset) -> None:
    table = PCA().fit(correlated_dataset).cumulative_table()
    assert list(table.columns) == ["importance", "proportion", "cumulative"]
    assert list(table.index) == ["pc_1", "pc_2", "pc_3", "pc_4"]
    assert table["proportion"].sum() == pytest.approx(1.0)

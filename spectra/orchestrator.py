"""工作流编排模块，串联配置加载、数据读取、变换拟合、模型应用与结果保存。"""

from __future__ import annotations

import logging
import pathlib
from typing import Any, Dict, Mapping, Optional

import pandas as pd

from spectra.algorithms.registry import ALGORITHM_REGISTRY, build_transformation
from spectra.config.loader import ConfigLoader, WorkflowConfig
from spectra.core.cancellation import StopCheck
from spectra.core.selection import SelectionPolicy
from spectra.data.dataset import Dataset
from spectra.models.base import TransformationModel

logger = logging.getLogger(__name__)


def read_dataset(
    path: str | pathlib.Path,
    special_columns: Optional[Mapping[str, str]] = None,
    index_column: Optional[str] = None,
) -> Dataset:
    """Read a CSV table into a ``Dataset``.

    中文说明：读取 CSV 文件，可选地指定索引列，并标记特殊字段。
    """
    path = pathlib.Path(path)
    if not path.exists():
        raise FileNotFoundError(f"找不到数据文件：{path}")
    frame = pd.read_csv(path, index_col=index_column)
    return Dataset(frame, dict(special_columns or {}))


def summarize_model(model: TransformationModel) -> Dict[str, Any]:
    """Describe a fitted model as JSON-friendly values."""

    table = model.cumulative_table()
    return {
        "model": type(model).__name__,
        "fields": list(model.field_names),
        "number_of_components": model.number_of_components,
        "components_used": model.resolve_count(),
        "importance": [float(v) for v in table["importance"]],
        "cumulative": [float(v) for v in table["cumulative"]],
    }


def run_fit_workflow(config_path: str, check_for_stop: Optional[StopCheck] = None) -> Dict[str, Any]:
    """Fit the transformation described by configuration and persist its outputs.

    中文说明：
        1. 读取配置与输入数据；
        2. 通过算法注册表实例化变换并拟合；
        3. 保存模型（joblib）与变换后的数据（CSV），返回模型摘要。
    """

    config = WorkflowConfig.from_dict(ConfigLoader(config_path).load())
    dataset = read_dataset(
        config.data.input_path,
        config.data.special_columns,
        config.data.index_column,
    )
    algorithm = build_transformation(config.transformation, ALGORITHM_REGISTRY)
    logger.info("Fitting %r on %r", algorithm, dataset)

    transformed, model = algorithm.fit_transform(dataset, check_for_stop=check_for_stop)

    model_path = pathlib.Path(config.output.model_path)
    model.save(model_path)
    summary = summarize_model(model)
    summary["model_path"] = str(model_path)

    if config.output.dataset_path:
        dataset_path = pathlib.Path(config.output.dataset_path)
        dataset_path.parent.mkdir(parents=True, exist_ok=True)
        transformed.frame.to_csv(dataset_path, index=config.data.index_column is not None)
        summary["dataset_path"] = str(dataset_path)
    return summary


def run_apply_workflow(
    model_path: str | pathlib.Path,
    input_path: str | pathlib.Path,
    output_path: str | pathlib.Path,
    special_columns: Optional[Mapping[str, str]] = None,
    index_column: Optional[str] = None,
    number_of_components: Optional[int] = None,
    variance_threshold: Optional[float] = None,
    keep_attributes: Optional[bool] = None,
    check_for_stop: Optional[StopCheck] = None,
) -> pathlib.Path:
    """Apply a persisted model to a new table and write the result.

    中文说明：可在不重新拟合的情况下，通过成分数量或方差阈值覆盖模型默认的选择策略；
    覆盖仅作用于本次调用，不修改模型本身。
    """

    model_path = pathlib.Path(model_path)
    if not model_path.exists():
        raise FileNotFoundError(f"找不到模型文件：{model_path}")
    model = TransformationModel.load(model_path)
    dataset = read_dataset(input_path, special_columns, index_column)

    policy: Optional[SelectionPolicy] = None
    if number_of_components is not None:
        policy = SelectionPolicy.fixed(number_of_components)
    elif variance_threshold is not None:
        policy = SelectionPolicy.threshold(variance_threshold)

    transformed = model.apply(
        dataset,
        policy=policy,
        keep_attributes=keep_attributes,
        check_for_stop=check_for_stop,
    )
    output_path = pathlib.Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    transformed.frame.to_csv(output_path, index=index_column is not None)
    return output_path


__all__ = ["read_dataset", "summarize_model", "run_fit_workflow", "run_apply_workflow"]

"""变换模型基类模块，定义模型应用、成分权重报告与持久化的统一接口。"""

from __future__ import annotations

import logging
import pathlib
import warnings
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple, Type, Union

import joblib
import numpy as np
import pandas as pd

from ..core.cancellation import StopCheck, as_stop_check
from ..core.components import ComponentVector, importance_proportions
from ..core.selection import SelectionPolicy, resolve_component_count
from ..data.dataset import Dataset
from ..exceptions import ComponentCountWarning, ShapeMismatchError

logger = logging.getLogger(__name__)

DataLike = Union[Dataset, pd.DataFrame]


class TransformationModel(ABC):
    """Fitted transformation that projects records into component space.

    中文说明
    -------
    模型在拟合时创建一次，之后训练均值与成分均不再改变。唯一允许的运行时调整是
    成分选择策略：既可以通过 ``set_selection`` 修改共享实例的默认策略，也可以在
    每次 ``apply`` 时传入 ``policy`` 参数（多线程并发应用时应使用后者）。

    Parameters
    ----------
    field_names:
        Ordered regular field names seen at fit time.
    means:
        Training means used to center records at apply time, ``None`` when the
        transformation works on raw values.
    components:
        Components in output order (already ranked where ranking applies).
    prefix:
        Prefix of generated field names, e.g. ``pc`` gives ``pc_1, pc_2, ...``.
    selection:
        Default selection policy resolved on every ``apply``.
    """

    # 中文说明：每处理这么多条记录检查一次中止请求。
    block_size = 5_000

    supports_threshold = True

    def __init__(
        self,
        field_names: Sequence[str],
        means: Optional[np.ndarray],
        components: Sequence[ComponentVector],
        prefix: str,
        selection: Optional[SelectionPolicy] = None,
        keep_attributes: bool = False,
    ) -> None:
        self.field_names: Tuple[str, ...] = tuple(str(name) for name in field_names)
        self.means = None if means is None else np.array(means, dtype=float, copy=True)
        if self.means is not None:
            self.means.setflags(write=False)
        self.components: Tuple[ComponentVector, ...] = tuple(components)
        self.prefix = prefix
        self.selection = selection or SelectionPolicy.keep_all()
        self.keep_attributes = keep_attributes

    @property
    def number_of_fields(self) -> int:
        return len(self.field_names)

    @property
    def number_of_components(self) -> int:
        return len(self.components)

    @property
    def importances(self) -> np.ndarray:
        return np.array([component.importance for component in self.components], dtype=float)

    def set_selection(self, policy: SelectionPolicy) -> None:
        """Replace the default selection policy without refitting.

        中文说明：相当于在应用阶段重新绑定“成分数量 / 方差阈值”参数，会影响共享实例。
        """
        resolve_component_count(policy, self.cumulative_proportions(), self.number_of_components, self.supports_threshold)
        self.selection = policy

    def set_keep_attributes(self, keep_attributes: bool) -> None:
        self.keep_attributes = bool(keep_attributes)

    def cumulative_proportions(self) -> np.ndarray:
        return importance_proportions(self.importances)[1]

    def cumulative_table(self) -> pd.DataFrame:
        """Importance, proportion of total and running proportion per component.

        中文说明：该表在调用时即时计算，不随模型保存。
        """
        proportions, cumulative = importance_proportions(self.importances)
        return pd.DataFrame(
            {
                "importance": self.importances,
                "proportion": proportions,
                "cumulative": cumulative,
            },
            index=pd.Index(self.component_names(self.number_of_components), name="component"),
        )

    def component_names(self, count: int) -> List[str]:
        return [f"{self.prefix}_{i + 1}" for i in range(count)]

    def resolve_count(self, policy: Optional[SelectionPolicy] = None) -> int:
        """Number of leading components kept under ``policy`` (default: model policy)."""

        chosen = policy if policy is not None else self.selection
        return resolve_component_count(
            chosen,
            self.cumulative_proportions(),
            self.number_of_components,
            self.supports_threshold,
        )

    def apply(
        self,
        data: DataLike,
        policy: Optional[SelectionPolicy] = None,
        keep_attributes: Optional[bool] = None,
        check_for_stop: Optional[StopCheck] = None,
    ) -> DataLike:
        """Project ``data`` into component space.

        中文说明
        -------
        1. 按训练时的字段名称与顺序取出常规字段，数量或名称不一致时报错；
        2. 解析本次调用使用的成分数量；
        3. 按块投影所有记录，每块之间检查一次中止请求；
        4. 保留特殊字段，按需保留原常规字段，并追加新生成的字段。

        The return type mirrors the input: a ``DataFrame`` in, a ``DataFrame`` out.
        """
        dataset = Dataset.coerce(data)
        stop = as_stop_check(check_for_stop)
        columns = self._check_header(dataset)
        dataset.validate(type(self).__name__)
        count = self.resolve_count(policy)
        keep = self.keep_attributes if keep_attributes is None else keep_attributes

        matrix = dataset.regular_matrix(columns)
        output = np.empty((matrix.shape[0], count), dtype=float)
        for start in range(0, matrix.shape[0], self.block_size):
            stop()
            end = start + self.block_size
            output[start:end] = self._project(matrix[start:end], count)
        logger.debug("Applied %s to %d record(s) keeping %d component(s)", type(self).__name__, len(matrix), count)

        result = dataset.with_generated(output, self.component_names(count), keep_original=keep, replaced=columns)
        if isinstance(data, pd.DataFrame):
            return result.frame
        return result

    @abstractmethod
    def _project(self, block: np.ndarray, count: int) -> np.ndarray:
        """Project a block of raw records onto the first ``count`` components."""

        raise NotImplementedError

    def _check_header(self, dataset: Dataset) -> List[str]:
        regular = dataset.regular_columns
        if len(regular) != self.number_of_fields:
            raise ShapeMismatchError(self.number_of_fields, len(regular))
        missing = [name for name in self.field_names if name not in regular]
        if missing:
            raise ShapeMismatchError(self.number_of_fields, len(regular), f"missing field(s) {missing}")
        return list(self.field_names)

    def component_weights(self, component: int) -> pd.Series:
        """Weights of the ``component``-th component (1-indexed) for reporting.

        中文说明：编号小于 1 时取第一个成分；超过成分数量时给出警告并取最后一个。
        """
        if component < 1:
            component = 1
        if component > self.number_of_components:
            warnings.warn(
                f"Creating weights of component {self.number_of_components}!",
                ComponentCountWarning,
                stacklevel=2,
            )
            component = self.number_of_components
        labels, values = self._weight_vector(component - 1)
        return pd.Series(values, index=labels, name=f"{self.prefix}_{component}", dtype=float)

    @abstractmethod
    def _weight_vector(self, index: int) -> Tuple[pd.Index, np.ndarray]:
        raise NotImplementedError

    def describe(self) -> str:
        """Readable summary listing every component as a weighted sum."""

        lines = ["", f"{type(self).__name__}:", self.selection.describe()]
        for i in range(self.number_of_components):
            labels, values = self._weight_vector(i)
            terms = []
            for label, value in zip(labels, values):
                sign = "+" if value > 0 else "-"
                terms.append(f" {sign} {abs(value):.3f} * {label}")
            lines.append(f"{self.prefix.upper()} {i + 1}:" + "".join(terms))
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(fields={self.number_of_fields}, components={self.number_of_components}, "
            f"prefix='{self.prefix}')"
        )

    def save(self, path: str | pathlib.Path) -> None:
        """Persist the model instance using joblib.

        中文说明：利用 joblib 将模型对象保存到文件中，必要时创建父目录。
        """
        path = pathlib.Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        joblib.dump(self, path)

    @classmethod
    def load(cls: Type["TransformationModel"], path: str | pathlib.Path) -> "TransformationModel":
        """Load a persisted model instance from disk.

        中文说明：从文件恢复模型对象，并确认其类型与调用方期望一致。
        """
        model = joblib.load(path)
        if not isinstance(model, cls):
            raise TypeError(f"{path} does not contain a {cls.__name__}, found {type(model).__name__}")
        return model


__all__ = ["TransformationModel", "DataLike"]

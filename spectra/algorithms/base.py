"""变换算法基类模块，定义统一的拟合接口与参数存储约定。"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional, Tuple

import numpy as np
from sklearn.utils import check_random_state

from ..core.cancellation import StopCheck
from ..core.selection import SelectionPolicy
from ..data.dataset import Dataset
from ..exceptions import DivergenceError, PreconditionError
from ..models.base import DataLike, TransformationModel

logger = logging.getLogger(__name__)


class BaseTransformation(ABC):
    """Abstract base class for component-extraction algorithms.

    中文说明：为所有成分提取算法提供统一的入参存储、拟合与“拟合后立即应用”接口。
    每次 ``fit`` 都基于输入数据的副本计算，并返回一个全新的、互不共享状态的模型。
    """

    #: 中文说明：算法名称，用于异常与日志信息。
    display_name = "transformation"

    def __init__(self, **params: Any) -> None:
        """Store initialization parameters for concrete algorithms.

        中文说明：保存算法初始化参数，供子类构建内部状态时使用。
        """
        self.params = params

    @abstractmethod
    def fit(self, data: DataLike, check_for_stop: Optional[StopCheck] = None) -> TransformationModel:
        """Fit the transformation and return the resulting model.

        中文说明：在子类中实现拟合逻辑；中止或失败时不返回任何部分模型。
        """
        raise NotImplementedError

    def fit_transform(
        self,
        data: DataLike,
        check_for_stop: Optional[StopCheck] = None,
    ) -> Tuple[DataLike, TransformationModel]:
        """Fit on ``data`` and return the transformed data together with the model.

        中文说明：组合拟合与应用两个步骤，减少调用方样板代码。
        """
        model = self.fit(data, check_for_stop=check_for_stop)
        return model.apply(data, check_for_stop=check_for_stop), model

    def _prepare(self, data: DataLike) -> Dataset:
        """Wrap and validate input before any computation starts."""

        dataset = Dataset.coerce(data)
        dataset.validate(self.display_name)
        if len(dataset) == 0:
            raise PreconditionError(f"{self.display_name} requires at least one record")
        return dataset

    @staticmethod
    def _random_state(seed: Any) -> np.random.RandomState:
        # 中文说明：统一将 None、整数种子或已有生成器转换为 RandomState，保证可复现。
        return check_random_state(seed)

    def _check_finite(self, matrix: np.ndarray, iteration: int, hint: str) -> None:
        if not np.all(np.isfinite(matrix)):
            logger.error("%s diverged in iteration %d", self.display_name, iteration)
            raise DivergenceError(self.display_name, iteration, hint)

    def __repr__(self) -> str:
        options = ", ".join(f"{key}={value!r}" for key, value in self.params.items())
        return f"{type(self).__name__}({options})"


def iteration_log_interval(max_iteration: int) -> int:
    """Power of ten spacing the progress log lines of an iterative fit."""

    # 中文说明：迭代次数越多，日志间隔越大，使日志行数保持在几十行以内。
    interval = 1
    while max_iteration // interval > 10 and max_iteration // (interval * 10) >= 3:
        interval *= 10
    return interval


def selection_from_params(
    selection: Optional[SelectionPolicy],
    dimensionality_reduction: Optional[str],
    number_of_components: Optional[int],
    variance_threshold: Optional[float],
) -> SelectionPolicy:
    """Accept either a ready policy or the flat configuration keys."""

    # 中文说明：配置文件中通常以扁平键给出选择策略，这里统一转换为 SelectionPolicy。
    if selection is not None:
        return selection
    return SelectionPolicy.from_config(
        {
            "dimensionality_reduction": dimensionality_reduction or "none",
            "number_of_components": number_of_components,
            "variance_threshold": variance_threshold,
        }
    )


__all__ = ["BaseTransformation", "iteration_log_interval", "selection_from_params"]

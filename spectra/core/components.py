"""成分向量模块，定义权重向量与重要性的配对以及排序、累计比例计算。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Tuple

import numpy as np


@dataclass(eq=False)
class ComponentVector:
    """A basis direction paired with its importance score.

    中文说明：一个成分由权重向量与重要性（特征值或奇异值）组成；
    排序规则为重要性降序，相同重要性时保持原有顺序（稳定排序）。
    """

    weights: np.ndarray
    importance: float

    def __post_init__(self) -> None:
        self.weights = np.array(self.weights, dtype=float, copy=True)
        # 中文说明：拟合完成后权重不可再被修改。
        self.weights.setflags(write=False)
        self.importance = float(self.importance)

    def __lt__(self, other: "ComponentVector") -> bool:
        # 中文说明：“小于”表示排在前面，即重要性更大。
        return self.importance > other.importance

    def __len__(self) -> int:
        return int(self.weights.shape[0])


def rank_components(components: Iterable[ComponentVector]) -> List[ComponentVector]:
    """Sort components by descending importance, keeping ties in input order."""

    return sorted(components)


def components_from_columns(vectors: np.ndarray, importances: Sequence[float]) -> List[ComponentVector]:
    """Pair every column of ``vectors`` with the matching importance."""

    vectors = np.asarray(vectors, dtype=float)
    return [ComponentVector(vectors[:, i], importances[i]) for i in range(vectors.shape[1])]


def importance_proportions(importances: Sequence[float]) -> Tuple[np.ndarray, np.ndarray]:
    """Return per-component proportions of the total and their running sum.

    中文说明：比例 = 单个重要性 / 重要性总和；累计比例为其前缀和，最后一项应为 1。
    该表只在需要时计算，不随模型持久化。
    """
    values = np.asarray(importances, dtype=float)
    if values.size == 0:
        return values.copy(), values.copy()
    total = float(values.sum())
    if total == 0.0:
        # 中文说明：全部重要性为零时无法定义比例，均分处理。
        proportions = np.full(values.shape, 1.0 / values.size)
    else:
        proportions = values / total
    return proportions, np.cumsum(proportions)


__all__ = [
    "ComponentVector",
    "rank_components",
    "components_from_columns",
    "importance_proportions",
]

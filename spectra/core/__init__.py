"""共享基础组件：统计量、成分向量、选择策略、中止检查与核函数。"""

from __future__ import annotations

from .cancellation import StopFlag
from .components import ComponentVector, importance_proportions, rank_components
from .selection import ReductionType, SelectionPolicy, resolve_component_count

__all__ = [
    "StopFlag",
    "ComponentVector",
    "rank_components",
    "importance_proportions",
    "ReductionType",
    "SelectionPolicy",
    "resolve_component_count",
]

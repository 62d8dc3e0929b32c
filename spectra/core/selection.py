"""成分选择策略模块，将“全部 / 固定数量 / 累计比例阈值”解析为具体成分数量。"""

from __future__ import annotations

import warnings
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Sequence

import numpy as np

from ..exceptions import ComponentCountWarning, InvalidParameterError


class ReductionType(str, Enum):
    """Dimensionality reduction modes."""

    NONE = "none"
    FIXED = "fixed"
    THRESHOLD = "threshold"

    @classmethod
    def parse(cls, value: Any) -> "ReductionType":
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower().replace(" ", "_")
        # 中文说明：兼容 "fixed number"、"keep variance" 等旧式写法。
        aliases = {
            "fixed_number": cls.FIXED,
            "keep_variance": cls.THRESHOLD,
            "variance_threshold": cls.THRESHOLD,
        }
        if text in aliases:
            return aliases[text]
        try:
            return cls(text)
        except ValueError as exc:
            raise InvalidParameterError(
                f"Unknown dimensionality reduction '{value}', expected one of {[m.value for m in cls]}"
            ) from exc


@dataclass(frozen=True)
class SelectionPolicy:
    """How many ranked components an ``apply`` call keeps.

    中文说明
    -------
    - ``NONE``：保留全部成分；
    - ``FIXED``：保留 ``min(k, 可用数量)`` 个成分，超出时给出警告；
    - ``THRESHOLD``：保留累计比例首次达到阈值的最短前缀（含一个额外下标的规则）。
    """

    reduction: ReductionType = ReductionType.NONE
    number_of_components: Optional[int] = None
    variance_threshold: Optional[float] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "reduction", ReductionType.parse(self.reduction))
        if self.reduction is ReductionType.FIXED:
            k = self.number_of_components
            if k is None or int(k) != k or k < 1:
                raise InvalidParameterError(f"number_of_components must be a positive integer, got {k!r}")
            object.__setattr__(self, "number_of_components", int(k))
        elif self.reduction is ReductionType.THRESHOLD:
            t = self.variance_threshold
            if t is None or not 0.0 <= float(t) <= 1.0:
                raise InvalidParameterError(f"variance_threshold must lie in [0, 1], got {t!r}")
            object.__setattr__(self, "variance_threshold", float(t))

    @classmethod
    def keep_all(cls) -> "SelectionPolicy":
        return cls(ReductionType.NONE)

    @classmethod
    def fixed(cls, number_of_components: int) -> "SelectionPolicy":
        return cls(ReductionType.FIXED, number_of_components=number_of_components)

    @classmethod
    def threshold(cls, variance_threshold: float) -> "SelectionPolicy":
        return cls(ReductionType.THRESHOLD, variance_threshold=variance_threshold)

    @classmethod
    def from_config(cls, config: Optional[Mapping[str, Any]]) -> "SelectionPolicy":
        """Build a policy from a configuration mapping.

        中文说明：读取 ``dimensionality_reduction``、``number_of_components``、
        ``variance_threshold`` 三个键；缺省时保留全部成分。
        """
        if not config:
            return cls.keep_all()
        reduction = ReductionType.parse(config.get("dimensionality_reduction", ReductionType.NONE))
        if reduction is ReductionType.FIXED:
            return cls.fixed(config.get("number_of_components"))
        if reduction is ReductionType.THRESHOLD:
            threshold = config.get("variance_threshold")
            return cls.threshold(0.95 if threshold is None else threshold)
        return cls.keep_all()

    def describe(self) -> str:
        if self.reduction is ReductionType.FIXED:
            return f"Number of Components: {self.number_of_components}"
        if self.reduction is ReductionType.THRESHOLD:
            return f"Variance Threshold: {self.variance_threshold}"
        return "Number of Components: all"


def threshold_component_count(cumulative: Sequence[float], threshold: float) -> int:
    """Number of components kept for a cumulative-proportion threshold.

    中文说明：找到累计比例首次 ``>= threshold`` 的下标（若始终未达到则取最后一个），
    保留到该下标为止的全部成分；若结果等于成分总数，则少保留一个。阈值为 0 时保留全部。
    """
    values = np.asarray(cumulative, dtype=float)
    available = int(values.size)
    if available == 0:
        return 0
    if threshold == 0.0:
        return available
    crossing = int(np.argmax(values >= threshold)) if np.any(values >= threshold) else available - 1
    count = crossing + 1
    if count == available:
        count -= 1
    # 中文说明：仅有一个成分时至少保留一个。
    return max(1, count)


def resolve_component_count(
    policy: SelectionPolicy,
    cumulative: Sequence[float],
    available: int,
    supports_threshold: bool = True,
) -> int:
    """Turn ``policy`` into a concrete number of leading components."""

    if policy.reduction is ReductionType.NONE:
        return available
    if policy.reduction is ReductionType.FIXED:
        requested = int(policy.number_of_components)
        if requested > available:
            message = (
                f"The parameter 'number_of_components' is too large ({requested}); "
                f"using the {available} available component(s)."
            )
            warnings.warn(message, ComponentCountWarning, stacklevel=3)
            return available
        return requested
    if not supports_threshold:
        raise InvalidParameterError("This model does not support variance threshold selection")
    return threshold_component_count(cumulative, float(policy.variance_threshold))


__all__ = [
    "ReductionType",
    "SelectionPolicy",
    "threshold_component_count",
    "resolve_component_count",
]

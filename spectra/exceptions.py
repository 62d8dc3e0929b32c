"""异常与警告定义模块，统一描述拟合与应用过程中的失败类别。"""

from __future__ import annotations

from typing import Optional


class SpectraError(Exception):
    """Root of every error raised by the transformation engine.

    中文说明：所有引擎内部异常的基类，便于调用方统一捕获。
    """


class PreconditionError(SpectraError, ValueError):
    """Input or parameters violate a requirement checked before computing.

    中文说明：在正式计算之前发现的输入或参数问题，不做重试。
    """


class NonNumericFieldError(PreconditionError):
    """A regular field is not numeric."""

    def __init__(self, algorithm: str, field: str) -> None:
        super().__init__(f"{algorithm} requires numeric regular fields, but '{field}' is not numeric")
        self.algorithm = algorithm
        self.field = field


class MissingValuesError(PreconditionError):
    """A regular field contains missing values."""

    def __init__(self, algorithm: str, field: str, count: int) -> None:
        super().__init__(f"{algorithm} cannot handle missing values: field '{field}' has {count} missing value(s)")
        self.algorithm = algorithm
        self.field = field
        self.count = count


class InvalidParameterError(PreconditionError):
    """A configuration value is outside of its admissible range."""


class DivergenceError(SpectraError, ArithmeticError):
    """An iterative weight matrix became non-finite during training.

    中文说明：迭代过程中权重出现 NaN 或无穷大，本次拟合失败且不可重试。
    """

    def __init__(self, algorithm: str, iteration: int, hint: Optional[str] = None) -> None:
        message = f"{algorithm} diverged: non-finite weights in iteration {iteration}"
        if hint:
            message = f"{message}. {hint}"
        super().__init__(message)
        self.algorithm = algorithm
        self.iteration = iteration


class ShapeMismatchError(SpectraError, ValueError):
    """The dataset given to ``apply`` does not match the training header.

    中文说明：应用模型时的字段数量或名称与训练阶段不一致。
    """

    def __init__(self, expected: int, actual: int, detail: str = "") -> None:
        message = f"Model was trained on {expected} regular field(s), but the dataset provides {actual}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class ProcessStoppedError(SpectraError):
    """Raised by a stop check when the caller requested cancellation.

    中文说明：调用方主动中止时抛出，属于控制流程而非数值错误，部分结果全部丢弃。
    """


class SpectraWarning(UserWarning):
    """Base category for soft warnings; execution continues."""


class ComponentCountWarning(SpectraWarning):
    """The requested number of components was capped to what is available."""


class DegenerateComponentWarning(SpectraWarning):
    """A component could not be scaled because its importance is zero."""


class ScalabilityWarning(SpectraWarning):
    """A requested computation is likely to exceed comfortable memory or time."""


__all__ = [
    "SpectraError",
    "PreconditionError",
    "NonNumericFieldError",
    "MissingValuesError",
    "InvalidParameterError",
    "DivergenceError",
    "ShapeMismatchError",
    "ProcessStoppedError",
    "SpectraWarning",
    "ComponentCountWarning",
    "DegenerateComponentWarning",
    "ScalabilityWarning",
]

"""核函数模块，为核主成分分析提供可配置的对称相似度函数。"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Type

import numpy as np
from sklearn.metrics.pairwise import (
    euclidean_distances,
    linear_kernel,
    polynomial_kernel,
    rbf_kernel,
    sigmoid_kernel,
)

from ..exceptions import InvalidParameterError

# 中文说明：全局核函数注册表，键为配置中使用的核名称。
KERNEL_REGISTRY: Dict[str, Type["Kernel"]] = {}


def register_kernel(name: str) -> Callable[[Type["Kernel"]], Type["Kernel"]]:
    """Register a kernel class under the provided name."""

    def decorator(cls: Type["Kernel"]) -> Type["Kernel"]:
        if not issubclass(cls, Kernel):
            raise TypeError(f"Kernel class {cls.__name__} must inherit from Kernel")
        KERNEL_REGISTRY[name] = cls
        cls.name = name
        return cls

    return decorator


class Kernel(ABC):
    """Symmetric similarity function over numeric vectors.

    中文说明：``__call__`` 返回两组记录之间的成对相似度矩阵，形状为 ``(len(X), len(Y))``。
    """

    name = "kernel"

    def __init__(self, **params: Any) -> None:
        self.params = params

    @abstractmethod
    def __call__(self, X: np.ndarray, Y: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def describe(self) -> str:
        options = ", ".join(f"{key}={value}" for key, value in sorted(self.params.items()))
        return f"{self.name}({options})"

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.describe()})"


@register_kernel("dot")
class DotKernel(Kernel):
    """Plain inner product."""

    def __call__(self, X: np.ndarray, Y: np.ndarray) -> np.ndarray:
        return linear_kernel(X, Y)


@register_kernel("radial")
class RadialKernel(Kernel):
    """Gaussian RBF kernel ``exp(-gamma * ||x - y||^2)``."""

    def __init__(self, gamma: float = 1.0) -> None:
        if gamma <= 0:
            raise InvalidParameterError(f"kernel_gamma must be positive, got {gamma}")
        super().__init__(gamma=gamma)
        self.gamma = float(gamma)

    def __call__(self, X: np.ndarray, Y: np.ndarray) -> np.ndarray:
        return rbf_kernel(X, Y, gamma=self.gamma)


@register_kernel("polynomial")
class PolynomialKernel(Kernel):
    """``(gamma * <x, y> + coef0) ** degree``."""

    def __init__(self, degree: int = 2, gamma: float = 1.0, coef0: float = 1.0) -> None:
        if degree < 1:
            raise InvalidParameterError(f"kernel_degree must be at least 1, got {degree}")
        super().__init__(degree=degree, gamma=gamma, coef0=coef0)
        self.degree = int(degree)
        self.gamma = float(gamma)
        self.coef0 = float(coef0)

    def __call__(self, X: np.ndarray, Y: np.ndarray) -> np.ndarray:
        return polynomial_kernel(X, Y, degree=self.degree, gamma=self.gamma, coef0=self.coef0)


@register_kernel("neural")
class NeuralKernel(Kernel):
    """Sigmoid kernel ``tanh(a * <x, y> + b)``; not positive definite in general."""

    def __init__(self, a: float = 1.0, b: float = 0.0) -> None:
        super().__init__(a=a, b=b)
        self.a = float(a)
        self.b = float(b)

    def __call__(self, X: np.ndarray, Y: np.ndarray) -> np.ndarray:
        return sigmoid_kernel(X, Y, gamma=self.a, coef0=self.b)


@register_kernel("anova")
class AnovaKernel(Kernel):
    """``(sum_k exp(-gamma * (x_k - y_k)^2)) ** degree``."""

    def __init__(self, gamma: float = 1.0, degree: int = 2) -> None:
        super().__init__(gamma=gamma, degree=degree)
        self.gamma = float(gamma)
        self.degree = int(degree)

    def __call__(self, X: np.ndarray, Y: np.ndarray) -> np.ndarray:
        X = np.atleast_2d(np.asarray(X, dtype=float))
        Y = np.atleast_2d(np.asarray(Y, dtype=float))
        diff = X[:, np.newaxis, :] - Y[np.newaxis, :, :]
        summed = np.exp(-self.gamma * diff * diff).sum(axis=2)
        return summed ** self.degree


@register_kernel("epanechnikov")
class EpanechnikovKernel(Kernel):
    """``(1 - ||x - y||^2 / sigma^2) ** degree`` inside the support, 0 outside."""

    def __init__(self, sigma: float = 1.0, degree: int = 1) -> None:
        if sigma <= 0:
            raise InvalidParameterError(f"kernel_sigma must be positive, got {sigma}")
        super().__init__(sigma=sigma, degree=degree)
        self.sigma = float(sigma)
        self.degree = int(degree)

    def __call__(self, X: np.ndarray, Y: np.ndarray) -> np.ndarray:
        scaled = euclidean_distances(X, Y, squared=True) / (self.sigma * self.sigma)
        return np.where(scaled < 1.0, (1.0 - scaled) ** self.degree, 0.0)


@register_kernel("multiquadric")
class MultiquadricKernel(Kernel):
    """``sqrt(||x - y||^2 / sigma^2 + shift^2)``."""

    def __init__(self, sigma: float = 1.0, shift: float = 1.0) -> None:
        if sigma <= 0:
            raise InvalidParameterError(f"kernel_sigma must be positive, got {sigma}")
        super().__init__(sigma=sigma, shift=shift)
        self.sigma = float(sigma)
        self.shift = float(shift)

    def __call__(self, X: np.ndarray, Y: np.ndarray) -> np.ndarray:
        squared = euclidean_distances(X, Y, squared=True)
        return np.sqrt(squared / (self.sigma * self.sigma) + self.shift * self.shift)


def build_kernel(name: str, **params: Any) -> Kernel:
    """Instantiate a registered kernel by name.

    中文说明：名称未注册时抛出参数异常，提示可选的核函数。
    """
    if name not in KERNEL_REGISTRY:
        raise InvalidParameterError(f"Unknown kernel type: {name}; expected one of {sorted(KERNEL_REGISTRY)}")
    return KERNEL_REGISTRY[name](**params)


__all__ = [
    "Kernel",
    "KERNEL_REGISTRY",
    "register_kernel",
    "build_kernel",
    "DotKernel",
    "RadialKernel",
    "PolynomialKernel",
    "NeuralKernel",
    "AnovaKernel",
    "EpanechnikovKernel",
    "MultiquadricKernel",
]

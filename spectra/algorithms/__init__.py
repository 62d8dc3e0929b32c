"""变换算法子包初始化模块，导入注册表以触发内置算法的自动注册并导出公共接口。"""

from __future__ import annotations

from .base import BaseTransformation
from .registry import ALGORITHM_REGISTRY, build_transformation, get_algorithm_class, register_algorithm
from .fastica import FastICA
from .gha import GHA
from .kernel_pca import KernelPCA
from .pca import PCA
from .svd import SVD

__all__ = [
    "BaseTransformation",
    "ALGORITHM_REGISTRY",
    "register_algorithm",
    "get_algorithm_class",
    "build_transformation",
    "PCA",
    "SVD",
    "FastICA",
    "GHA",
    "KernelPCA",
]

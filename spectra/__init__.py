"""spectra：成分提取与线性变换模型引擎（PCA、SVD、FastICA、GHA、核 PCA）。"""

from __future__ import annotations

from .algorithms import (
    ALGORITHM_REGISTRY,
    GHA,
    PCA,
    SVD,
    BaseTransformation,
    FastICA,
    KernelPCA,
    build_transformation,
    get_algorithm_class,
    register_algorithm,
)
from .core import ReductionType, SelectionPolicy, StopFlag
from .data.dataset import Dataset
from .models import KernelModel, LinearModel, TransformationModel

__version__ = "0.1.0"

__all__ = [
    "ALGORITHM_REGISTRY",
    "BaseTransformation",
    "Dataset",
    "FastICA",
    "GHA",
    "KernelModel",
    "KernelPCA",
    "LinearModel",
    "PCA",
    "ReductionType",
    "SVD",
    "SelectionPolicy",
    "StopFlag",
    "TransformationModel",
    "build_transformation",
    "get_algorithm_class",
    "register_algorithm",
]

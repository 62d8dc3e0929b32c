"""变换模型子包，导出线性模型与核模型。"""

from __future__ import annotations

from .base import TransformationModel
from .kernel import KernelModel
from .linear import LinearModel

__all__ = ["TransformationModel", "LinearModel", "KernelModel"]

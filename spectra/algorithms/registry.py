"""算法注册表模块，提供变换算法的注册、查询与按配置实例化工具。"""

from __future__ import annotations

import importlib
import pkgutil
from pathlib import Path
from typing import Any, Callable, Dict, Mapping, Optional, Type

from ..core.selection import SelectionPolicy
from .base import BaseTransformation

# 中文说明：全局算法注册表，键为算法名称，值为算法类。
ALGORITHM_REGISTRY: Dict[str, Type[BaseTransformation]] = {}


def register_algorithm(name: str) -> Callable[[Type[BaseTransformation]], Type[BaseTransformation]]:
    """Register an algorithm class under the provided name.

    中文说明：作为装饰器使用，将算法类与名称绑定到注册表，便于通过配置加载。
    """

    def decorator(cls: Type[BaseTransformation]) -> Type[BaseTransformation]:
        """Inner decorator that performs the actual registration."""

        # 中文说明：确保被注册对象是 BaseTransformation 的子类，避免错误使用。
        if not issubclass(cls, BaseTransformation):
            raise TypeError(f"Algorithm class {cls.__name__} must inherit from BaseTransformation")
        ALGORITHM_REGISTRY[name] = cls
        return cls

    return decorator


def get_algorithm_class(name: str) -> Type[BaseTransformation]:
    """Retrieve a registered algorithm class by its name.

    中文说明：根据算法名称返回对应的类，若未注册会抛出 KeyError，提醒用户配置错误。
    """

    return ALGORITHM_REGISTRY[name]


def build_transformation(
    config: Mapping[str, Any],
    registry: Optional[Dict[str, Type[BaseTransformation]]] = None,
) -> BaseTransformation:
    """Instantiate an algorithm from a ``{"method": ..., "params": ...}`` mapping.

    中文说明：根据配置中的算法名称和参数实例化算法；``selection`` 段落会转换为选择策略。
    """
    registry = ALGORITHM_REGISTRY if registry is None else registry
    method = config.get("method")
    if not method:
        raise ValueError("Transformation configuration must include a 'method' field")
    if method not in registry:
        raise ValueError(f"Unknown transformation method: {method}")
    params = dict(config.get("params") or {})
    if config.get("selection"):
        params["selection"] = SelectionPolicy.from_config(config["selection"])
    if "keep_attributes" in config:
        params["keep_attributes"] = bool(config["keep_attributes"])
    return registry[method](**params)


def _auto_import_algorithms() -> None:
    """Import built-in algorithm modules so they register on access."""

    # 中文说明：遍历算法目录并导入其中的实现模块，确保内置算法自动注册。
    package_path = Path(__file__).resolve().parent
    for module_info in pkgutil.iter_modules([str(package_path)]):
        if module_info.ispkg or module_info.name in {"base", "registry"}:
            continue
        importlib.import_module(f"{__name__.rsplit('.', 1)[0]}.{module_info.name}")


_auto_import_algorithms()


__all__ = [
    "ALGORITHM_REGISTRY",
    "register_algorithm",
    "get_algorithm_class",
    "build_transformation",
]

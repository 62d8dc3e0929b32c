"""配置加载模块，封装 YAML 文件解析并整理变换工作流所需的配置段落。"""

from __future__ import annotations

import pathlib
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import yaml


class ConfigLoader:
    """Utility for reading YAML configuration files.

    中文说明
    -------
    该类用于读取 YAML 配置文件，并返回解析后的字典；空文件视为空配置。

    Parameters
    ----------
    path:
        Path to the YAML configuration file.
    """

    def __init__(self, path: str | pathlib.Path) -> None:
        """Initialize the loader with a path.

        中文说明：接受字符串或 ``Path`` 对象并转换为 ``Path`` 实例。
        """
        self.path = pathlib.Path(path)

    def load(self) -> Dict[str, Any]:
        """Load the YAML configuration file.

        Returns
        -------
        dict
            Parsed configuration dictionary.
        """

        with self.path.open("r", encoding="utf-8") as fp:
            data = yaml.safe_load(fp)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValueError(f"配置文件顶层必须是映射：{self.path}")
        return data


@dataclass
class DataConfig:
    """Location of the input table and its special columns.

    中文说明：描述输入 CSV 路径、特殊字段及其角色、以及索引列。
    """

    input_path: str
    special_columns: Dict[str, str] = field(default_factory=dict)
    index_column: Optional[str] = None


@dataclass
class OutputConfig:
    """Where the fitted model and the transformed table are written."""

    model_path: str
    dataset_path: Optional[str] = None


@dataclass
class WorkflowConfig:
    """Typed view over the sections of a transformation workflow file.

    中文说明：``transformation`` 段落保持字典形式，交由算法注册表实例化。
    """

    data: DataConfig
    transformation: Dict[str, Any]
    output: OutputConfig

    @classmethod
    def from_dict(cls, config: Dict[str, Any]) -> "WorkflowConfig":
        for section in ("data", "transformation", "output"):
            if section not in config:
                raise KeyError(f"配置文件缺少 {section} 段落。")
        data_section = dict(config["data"])
        special = data_section.get("special_columns") or {}
        if isinstance(special, (list, tuple)):
            # 中文说明：允许以列表形式给出特殊字段，此时角色名即列名。
            special = {str(name): str(name) for name in special}
        data_section["special_columns"] = dict(special)
        return cls(
            data=DataConfig(**data_section),
            transformation=dict(config["transformation"]),
            output=OutputConfig(**config["output"]),
        )


__all__ = ["ConfigLoader", "DataConfig", "OutputConfig", "WorkflowConfig"]

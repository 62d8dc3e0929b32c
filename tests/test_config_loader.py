"""ConfigLoader 单元测试，验证 YAML 解析与工作流配置整理逻辑。"""

from pathlib import Path

import pytest

from spectra.config.loader import ConfigLoader, WorkflowConfig


def test_config_loader_reads_yaml(tmp_path: Path):
    """Ensure YAML content is parsed correctly.

    中文说明：检查 YAML 文件能被准确读取为字典。
    """

    config_path = tmp_path / "config.yaml"
    config_path.write_text("project_name: demo\nvalue: 42\n", encoding="utf-8")
    data = ConfigLoader(config_path).load()
    assert data == {"project_name": "demo", "value": 42}


def test_config_loader_empty_file(tmp_path: Path):
    config_path = tmp_path / "empty.yaml"
    config_path.write_text("", encoding="utf-8")
    assert ConfigLoader(config_path).load() == {}


def test_config_loader_rejects_non_mapping(tmp_path: Path):
    config_path = tmp_path / "list.yaml"
    config_path.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        ConfigLoader(config_path).load()


def test_workflow_config_sections():
    """特殊字段允许以列表形式给出，此时角色名即列名。"""

    config = WorkflowConfig.from_dict(
        {
            "data": {"input_path": "data.csv", "special_columns": ["id", "label"]},
            "transformation": {"method": "pca"},
            "output": {"model_path": "model.joblib"},
        }
    )

    assert config.data.special_columns == {"id": "id", "label": "label"}
    assert config.data.index_column is None
    assert config.transformation == {"method": "pca"}
    assert config.output.dataset_path is None


def test_workflow_config_missing_section():
    with pytest.raises(KeyError):
        WorkflowConfig.from_dict({"data": {"input_path": "x.csv"}, "transformation": {"method": "pca"}})

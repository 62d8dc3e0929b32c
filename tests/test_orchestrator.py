"""工作流编排测试，验证从 YAML 配置拟合、保存模型并对新数据应用的完整流程。"""

from pathlib import Path

import pytest

yaml = pytest.importorskip("yaml")
np = pytest.importorskip("numpy")
pd = pytest.importorskip("pandas")

from spectra.models.base import TransformationModel  # noqa: E402
from spectra.orchestrator import read_dataset, run_apply_workflow, run_fit_workflow  # noqa: E402


def create_sample_files(tmp_path: Path, frame: pd.DataFrame) -> Path:
    """Write the training table and a workflow configuration.

    中文说明：将样例数据保存为 CSV，并生成拟合所需的 YAML 配置文件。
    """

    input_path = tmp_path / "train.csv"
    frame.to_csv(input_path, index=False)
    config = {
        "data": {"input_path": str(input_path), "special_columns": {"id": "id", "label": "label"}},
        "transformation": {
            "method": "pca",
            "selection": {"dimensionality_reduction": "fixed", "number_of_components": 2},
        },
        "output": {
            "model_path": str(tmp_path / "models" / "pca.joblib"),
            "dataset_path": str(tmp_path / "output" / "train_pca.csv"),
        },
    }
    config_path = tmp_path / "config.yaml"
    config_path.write_text(yaml.safe_dump(config), encoding="utf-8")
    return config_path


def test_run_fit_workflow_end_to_end(tmp_path: Path, correlated_frame: pd.DataFrame):
    config_path = create_sample_files(tmp_path, correlated_frame)

    summary = run_fit_workflow(str(config_path))

    assert summary["model"] == "LinearModel"
    assert summary["fields"] == ["f1", "f2", "f3", "f4"]
    assert summary["number_of_components"] == 4
    assert summary["components_used"] == 2
    assert summary["cumulative"][-1] == pytest.approx(1.0)

    # 中文说明：模型与变换结果均应写入配置指定的位置。
    assert Path(summary["model_path"]).exists()
    output = pd.read_csv(summary["dataset_path"])
    assert list(output.columns) == ["id", "label", "pc_1", "pc_2"]
    assert len(output) == len(correlated_frame)


def test_run_apply_workflow_with_override(tmp_path: Path, correlated_frame: pd.DataFrame):
    """应用阶段可以覆盖成分数量，而不改变已保存的模型。"""

    config_path = create_sample_files(tmp_path, correlated_frame)
    summary = run_fit_workflow(str(config_path))

    new_input = tmp_path / "new.csv"
    correlated_frame.head(10).to_csv(new_input, index=False)

    output_path = run_apply_workflow(
        summary["model_path"],
        new_input,
        tmp_path / "output" / "new_pca.csv",
        special_columns={"id": "id", "label": "label"},
        number_of_components=3,
    )
    output = pd.read_csv(output_path)
    assert list(output.columns) == ["id", "label", "pc_1", "pc_2", "pc_3"]

    default_path = run_apply_workflow(
        summary["model_path"],
        new_input,
        tmp_path / "output" / "new_default.csv",
        special_columns={"id": "id", "label": "label"},
    )
    assert list(pd.read_csv(default_path).columns) == ["id", "label", "pc_1", "pc_2"]

    model = TransformationModel.load(summary["model_path"])
    assert model.resolve_count() == 2


def test_run_apply_workflow_missing_model(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        run_apply_workflow(tmp_path / "absent.joblib", tmp_path / "in.csv", tmp_path / "out.csv")


def test_read_dataset_missing_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        read_dataset(tmp_path / "absent.csv")

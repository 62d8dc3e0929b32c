"""Pytest 配置文件，用于调整导入路径并提供公共测试数据。"""

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    # 将项目根目录加入 sys.path，确保测试能够导入包。
    sys.path.insert(0, str(ROOT))

np = pytest.importorskip("numpy")
pd = pytest.importorskip("pandas")

from spectra.data.dataset import Dataset  # noqa: E402


def make_correlated_frame(n_records: int = 100, seed: int = 0) -> pd.DataFrame:
    """Create four correlated numeric fields plus id/label columns.

    中文说明：由两个潜在因子线性混合并叠加噪声生成 4 个相关字段，另含标识与标签列。
    """

    rng = np.random.default_rng(seed)
    latent = rng.normal(size=(n_records, 2)) * np.array([3.0, 1.0])
    mixing = np.array([[1.0, 0.5, -0.3, 0.8], [0.2, -1.0, 0.7, 0.1]])
    values = latent @ mixing + rng.normal(scale=0.1, size=(n_records, 4))
    frame = pd.DataFrame(values, columns=["f1", "f2", "f3", "f4"])
    frame.insert(0, "id", np.arange(n_records))
    frame["label"] = np.where(values[:, 0] > 0, "pos", "neg")
    return frame


@pytest.fixture
def correlated_frame() -> pd.DataFrame:
    return make_correlated_frame()


@pytest.fixture
def correlated_dataset(correlated_frame: pd.DataFrame) -> Dataset:
    return Dataset(correlated_frame, {"id": "id", "label": "label"})

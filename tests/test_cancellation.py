"""协作式中止测试，验证拟合与应用在收到中止请求后抛出异常且不返回部分结果。"""

from __future__ import annotations

import pytest

from spectra.algorithms.fastica import FastICA
from spectra.algorithms.gha import GHA
from spectra.algorithms.kernel_pca import KernelPCA
from spectra.algorithms.pca import PCA
from spectra.algorithms.svd import SVD
from spectra.core.cancellation import StopFlag
from spectra.exceptions import ProcessStoppedError


def test_stop_flag_lifecycle() -> None:
    flag = StopFlag()
    flag.check()
    assert not flag.stopped

    flag.stop()
    assert flag.stopped
    with pytest.raises(ProcessStoppedError):
        flag()

    flag.reset()
    flag.check()


@pytest.mark.parametrize(
    "algorithm",
    [PCA(), SVD(), FastICA(random_state=0), GHA(number_of_iterations=50, random_state=0), KernelPCA()],
)
def test_stopped_fit_raises(correlated_dataset, algorithm) -> None:
    """中止标志已设置时，任何算法的拟合都应抛出 ProcessStoppedError。"""

    flag = StopFlag()
    flag.stop()
    with pytest.raises(ProcessStoppedError):
        algorithm.fit(correlated_dataset, check_for_stop=flag)


def test_stop_requested_during_iterations(correlated_dataset) -> None:
    """迭代过程中发出的中止请求应在下一次检查时生效。"""

    calls = {"count": 0}

    def stop_after_ten() -> None:
        calls["count"] += 1
        if calls["count"] > 10:
            raise ProcessStoppedError("stopped in test")

    with pytest.raises(ProcessStoppedError):
        GHA(number_of_iterations=1000, random_state=0).fit(correlated_dataset, check_for_stop=stop_after_ten)
    assert calls["count"] == 11


def test_stopped_apply_raises(correlated_dataset) -> None:
    model = PCA().fit(correlated_dataset)
    flag = StopFlag()
    flag.stop()
    with pytest.raises(ProcessStoppedError):
        model.apply(correlated_dataset, check_for_stop=flag)

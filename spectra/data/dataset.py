"""数据集封装模块，区分常规字段与特殊字段并负责输入校验。"""

from __future__ import annotations

from typing import Dict, List, Mapping, Optional, Sequence, Union

import numpy as np
import pandas as pd
from pandas.api.types import is_numeric_dtype

from ..exceptions import MissingValuesError, NonNumericFieldError, PreconditionError

SpecialSpec = Union[Mapping[str, str], Sequence[str], None]


class Dataset:
    """Tabular dataset split into regular and special (role-tagged) fields.

    中文说明
    -------
    包装 ``pandas.DataFrame``。特殊字段（如 id、label）在变换过程中原样透传，
    其余列均视为参与变换的常规字段，顺序与数据框列顺序一致。

    Parameters
    ----------
    frame:
        Records as rows, fields as columns.
    special:
        A mapping ``column -> role``, a plain sequence of column names or a
        single column name (the role then defaults to the column name).
    """

    def __init__(self, frame: pd.DataFrame, special: SpecialSpec = None) -> None:
        self.frame = frame
        if special is None:
            roles: Dict[str, str] = {}
        elif isinstance(special, str):
            roles = {special: special}
        elif isinstance(special, Mapping):
            roles = {str(column): str(role) for column, role in special.items()}
        else:
            roles = {str(column): str(column) for column in special}
        unknown = [column for column in roles if column not in frame.columns]
        if unknown:
            raise KeyError(f"Special columns not present in dataset: {unknown}")
        self.roles = roles

    @classmethod
    def coerce(cls, data: Union["Dataset", pd.DataFrame]) -> "Dataset":
        """Wrap a bare DataFrame, pass a Dataset through.

        中文说明：允许调用方直接传入数据框，此时视为没有特殊字段。
        """
        if isinstance(data, Dataset):
            return data
        if isinstance(data, pd.DataFrame):
            return cls(data)
        raise TypeError(f"Expected Dataset or DataFrame, got {type(data).__name__}")

    @property
    def special_columns(self) -> List[str]:
        return [column for column in self.frame.columns if column in self.roles]

    @property
    def regular_columns(self) -> List[str]:
        return [column for column in self.frame.columns if column not in self.roles]

    def __len__(self) -> int:
        return len(self.frame)

    def validate(self, algorithm: str, require_numeric: bool = True) -> None:
        """Check that regular fields are numeric and free of missing values.

        中文说明：在任何计算开始前完成校验，发现问题直接抛出前置条件异常。
        """
        for column in self.regular_columns:
            series = self.frame[column]
            if require_numeric and not is_numeric_dtype(series.dtype):
                raise NonNumericFieldError(algorithm, column)
            missing = int(series.isna().sum())
            if missing:
                raise MissingValuesError(algorithm, column, missing)

    def regular_matrix(self, columns: Optional[Sequence[str]] = None) -> np.ndarray:
        """Return a float64 copy of the regular fields (records x fields)."""

        selected = list(columns) if columns is not None else self.regular_columns
        return self.frame.loc[:, selected].to_numpy(dtype=float, copy=True)

    def with_generated(
        self,
        values: np.ndarray,
        names: Sequence[str],
        keep_original: bool = False,
        replaced: Optional[Sequence[str]] = None,
    ) -> "Dataset":
        """Build the output dataset with newly generated numeric fields.

        中文说明：保留特殊字段；根据 ``keep_original`` 决定是否保留原常规字段，
        新字段追加在末尾，索引保持不变。新字段与特殊字段重名时报错，特殊字段不会被覆盖。
        """
        dropped = list(replaced) if replaced is not None else self.regular_columns
        if keep_original:
            base = self.frame.copy()
        else:
            base = self.frame.drop(columns=dropped)
        generated = pd.DataFrame(values, index=self.frame.index, columns=list(names))
        special_clashes = [name for name in generated.columns if name in self.roles]
        if special_clashes:
            raise PreconditionError(
                f"Generated field name(s) {special_clashes} clash with special field(s); rename the special columns"
            )
        clashes = [name for name in generated.columns if name in base.columns]
        if clashes:
            # 中文说明：保留原字段时若与新字段重名，以新生成的值为准。
            base = base.drop(columns=clashes)
        return Dataset(pd.concat([base, generated], axis=1), dict(self.roles))

    def __repr__(self) -> str:
        return (
            f"Dataset(records={len(self.frame)}, regular={len(self.regular_columns)}, "
            f"special={self.special_columns})"
        )


__all__ = ["Dataset"]

"""应用入口脚本，加载已保存的模型并对新数据执行变换。"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from spectra.orchestrator import run_apply_workflow


def _parse_args() -> argparse.Namespace:
    """解析命令行参数。"""

    parser = argparse.ArgumentParser(description="对新的 CSV 数据应用已拟合的变换模型。")
    parser.add_argument("--model", required=True, help="必填：joblib 模型文件路径。")
    parser.add_argument("--input", required=True, help="必填：待变换的 CSV 文件路径。")
    parser.add_argument("--output", required=True, help="必填：变换结果的 CSV 输出路径。")
    parser.add_argument(
        "--special",
        action="append",
        default=[],
        metavar="COLUMN[=ROLE]",
        help="选填：特殊字段，可重复指定；角色缺省时与列名相同。",
    )
    parser.add_argument("--index-column", default=None, help="选填：作为索引读取的列名。")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--number-of-components", type=int, default=None, help="选填：覆盖模型的成分数量。")
    group.add_argument("--variance-threshold", type=float, default=None, help="选填：覆盖模型的累计方差阈值。")
    parser.add_argument("--keep-attributes", action="store_true", help="选填：保留原始常规字段。")
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="选填：日志级别，默认 INFO。",
    )
    return parser.parse_args()


def _parse_special(values: list[str]) -> dict[str, str]:
    special: dict[str, str] = {}
    for value in values:
        column, _, role = value.partition("=")
        special[column] = role or column
    return special


def main() -> None:
    """脚本主函数，负责触发模型应用并提示输出位置。"""

    args = _parse_args()
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    output_path = run_apply_workflow(
        args.model,
        args.input,
        args.output,
        special_columns=_parse_special(args.special),
        index_column=args.index_column,
        number_of_components=args.number_of_components,
        variance_threshold=args.variance_threshold,
        keep_attributes=True if args.keep_attributes else None,
    )
    # 中文说明：控制台打印结果的保存路径，方便集成系统进一步处理。
    print(str(output_path.resolve()))


if __name__ == "__main__":
    main()

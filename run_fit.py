"""拟合入口脚本，通过命令行参数加载配置并执行变换拟合工作流。"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path

from spectra.orchestrator import run_fit_workflow


def _parse_args() -> argparse.Namespace:
    """解析命令行参数。"""

    parser = argparse.ArgumentParser(
        description="传入 YAML 配置文件路径，拟合成分提取变换并保存模型。"
    )
    parser.add_argument(
        "--config",
        required=True,
        help="必填：配置文件路径，支持相对或绝对路径。",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="选填：日志级别，默认 INFO。",
    )
    return parser.parse_args()


def main() -> None:
    """脚本主函数，负责触发拟合并输出模型摘要。"""

    args = _parse_args()
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    config_path = Path(args.config)
    if not config_path.exists():
        # 中文说明：在正式执行前先检查配置文件是否存在，避免拟合过程运行到一半才失败。
        raise FileNotFoundError(f"配置文件不存在：{config_path}")

    summary = run_fit_workflow(str(config_path))
    # 中文说明：将结果格式化为 JSON 方便后续自动化系统解析。
    print(json.dumps(summary, ensure_ascii=False, indent=2, sort_keys=True))


if __name__ == "__main__":
    main()

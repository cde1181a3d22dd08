"""日志配置模块

基于loguru配置控制台和文件日志输出
"""

import sys
from typing import Optional

from loguru import logger


LOG_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level} | {name}:{function}:{line} | {message}"


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """配置loguru日志

    移除loguru默认的输出，重新添加指定级别的控制台输出；
    配置了log_file时额外添加按天轮转的文件输出

    Args:
        level: 日志级别，例如 "DEBUG"、"INFO"
        log_file: 日志文件路径，支持loguru的时间占位符
    """
    logger.remove()
    logger.add(sys.stderr, level=level.upper(), format=LOG_FORMAT)

    if log_file:
        logger.add(
            log_file,
            rotation="1 day",
            retention="30 days",
            level=level.upper(),
            format=LOG_FORMAT,
            encoding="utf-8"
        )

"""日志配置模块"""
import logging
import logging.handlers
from pathlib import Path
from typing import Optional

from constants import LOG_FORMAT, LOG_DATE_FORMAT


def setup_cli_logging(verbose: bool = False, log_file: Optional[Path] = None) -> logging.Logger:
    """
    为命令行工具配置根日志记录器

    配置模块自身只输出 DEBUG 级别日志，因此只有 verbose 时才会在控制台看到。

    Args:
        verbose: 是否输出 DEBUG 日志
        log_file: 额外写入的日志文件，按 1MB 轮转

    Returns:
        logging.Logger: 根日志记录器
    """
    root = logging.getLogger()
    root.handlers.clear()

    level = logging.DEBUG if verbose else logging.WARNING
    root.setLevel(level)
    formatter = logging.Formatter(LOG_FORMAT, LOG_DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file, maxBytes=1024 * 1024, backupCount=3, encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        root.addHandler(file_handler)

    return root

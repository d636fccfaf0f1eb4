"""
Unified logging system for the PaperID pack builder.

Provides:
- Console logging through rich, optional file output
- Timing and progress helpers used by the pack builder
- Custom exception hierarchy
"""

from __future__ import annotations

import logging
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.progress import BarColumn, Progress, TextColumn, TimeElapsedColumn

_console = Console(stderr=True)

# ========================================
# 自定义异常层次结构
# ========================================

class PaperIDError(Exception):
    """PaperID 基础异常"""

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class FileOperationError(PaperIDError):
    """文件操作错误（读取、写入、复制、打包）"""

    def __init__(self, message: str, file_path: Optional[Path] = None, **kwargs):
        details = {"file_path": str(file_path) if file_path else None, **kwargs}
        super().__init__(message, details)
        self.file_path = file_path


class ConfigurationError(PaperIDError):
    """配置错误（缺少必要参数、无效值等）"""

    def __init__(self, message: str, config_key: Optional[str] = None, **kwargs):
        details = {"config_key": config_key, **kwargs}
        super().__init__(message, details)
        self.config_key = config_key


class GlyphError(ConfigurationError):
    """字形表中缺少符号"""

    def __init__(self, symbol: str, **kwargs):
        super().__init__(
            f"Glyph table has no entry for '{symbol}'",
            config_key="glyphs",
            symbol=symbol,
            **kwargs
        )
        self.symbol = symbol


class TableError(PaperIDError):
    """元数据表或字形表格式错误"""

    def __init__(
        self,
        message: str,
        table: Optional[str] = None,
        key: Optional[str] = None,
        **kwargs
    ):
        details = {"table": table, "key": key, **kwargs}
        super().__init__(message, details)
        self.table = table
        self.key = key


# ========================================
# 日志类
# ========================================


class PackLogger:
    """Logger wrapper with convenience methods."""

    def __init__(
        self,
        name: str = "paperid",
        level: int = logging.INFO,
        log_file: Optional[Path] = None,
        use_rich: bool = True
    ):
        """
        Initialize logger.

        Args:
            name: Logger name
            level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            log_file: Optional file path for log output
            use_rich: Use rich formatting
        """
        self.logger = logging.getLogger(name)
        self.logger.setLevel(min(level, logging.DEBUG) if log_file else level)
        self.logger.handlers = []  # Clear existing handlers

        # Console handler
        if use_rich:
            console_handler = RichHandler(
                console=_console,
                rich_tracebacks=True,
                markup=False,
                show_time=True,
                show_path=False
            )
        else:
            console_handler = logging.StreamHandler(sys.stderr)
            formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            console_handler.setFormatter(formatter)

        console_handler.setLevel(level)
        self.logger.addHandler(console_handler)

        # File handler
        if log_file:
            log_file = Path(log_file)
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_formatter = logging.Formatter(
                '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            file_handler.setFormatter(file_formatter)
            file_handler.setLevel(logging.DEBUG)  # Log everything to file
            self.logger.addHandler(file_handler)

    def debug(self, msg: str, *args, **kwargs):
        self.logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs):
        self.logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        self.logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        self.logger.error(msg, *args, **kwargs)

    @contextmanager
    def timer(self, operation: str, level: int = logging.INFO):
        """
        Context manager for timing operations.

        Usage:
            with logger.timer("Building pack"):
                ...
        """
        start = time.time()
        self.logger.log(level, f"Starting: {operation}")
        try:
            yield
        finally:
            elapsed = time.time() - start
            self.logger.log(level, f"Completed: {operation} (took {elapsed:.2f}s)")

    @contextmanager
    def progress(
        self,
        total: int,
        description: str = "Processing",
        disable: bool = False
    ):
        """
        Context manager for progress tracking with Rich.

        Usage:
            with logger.progress(len(files), "Annotating") as update:
                for f in files:
                    ...
                    update(1)
        """
        with Progress(
            TextColumn("[progress.description]{task.description}"),
            BarColumn(),
            TextColumn("[progress.percentage]{task.percentage:>3.0f}%"),
            TimeElapsedColumn(),
            console=_console,
            disable=disable,
        ) as progress:
            task = progress.add_task(description, total=total)

            def update(advance: int = 1):
                progress.update(task, advance=advance)

            yield update


# Global logger instance
_default_logger: Optional[PackLogger] = None


def get_logger(
    name: str = "paperid",
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    use_rich: bool = True
) -> PackLogger:
    """
    Get or create global logger instance.

    Args:
        name: Logger name
        level: Logging level
        log_file: Optional log file path
        use_rich: Use rich formatting

    Returns:
        PackLogger instance
    """
    global _default_logger
    if _default_logger is None:
        _default_logger = PackLogger(
            name=name,
            level=level,
            log_file=log_file,
            use_rich=use_rich
        )
    return _default_logger


def setup_logger(
    name: str = "paperid",
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    use_rich: bool = True
) -> PackLogger:
    """Replace the global logger with a freshly configured one."""
    global _default_logger
    _default_logger = PackLogger(
        name=name,
        level=level,
        log_file=log_file,
        use_rich=use_rich
    )
    return _default_logger

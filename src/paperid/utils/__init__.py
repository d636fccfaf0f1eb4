from .logger import (
    PaperIDError, FileOperationError, ConfigurationError, GlyphError, TableError,
    PackLogger, get_logger, setup_logger
)
from .io import (
    read_text_file, write_text_file, read_json_file, write_json_file,
    copy_file, copy_tree, find_files, clean_dir
)
from .config import PackConfig, ConfigManager, default_config_path

# tables 依赖 core，需直接从 paperid.utils.tables 导入，避免循环导入

__all__ = [
    # errors
    "PaperIDError",
    "FileOperationError",
    "ConfigurationError",
    "GlyphError",
    "TableError",
    # logger
    "PackLogger",
    "get_logger",
    "setup_logger",
    # io
    "read_text_file",
    "write_text_file",
    "read_json_file",
    "write_json_file",
    "copy_file",
    "copy_tree",
    "find_files",
    "clean_dir",
    # config
    "PackConfig",
    "ConfigManager",
    "default_config_path",
]

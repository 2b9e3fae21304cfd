# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime bootstrap for g3release.

Runs once per CLI command before any metadata is read:
  1. Check the interpreter version
  2. Configure every g3release logger (level, optional log file)
  3. Log where the run is happening
"""

from pathlib import Path

from g3release.config.schema import GlobalConfig
from g3release.logging.logger import configure_loggers, get_logger
from g3release.runtime.environment import check_minimum_python, get_system_info


def bootstrap(config: GlobalConfig) -> Path:
    """
    Put the process into a known state and return the resolved source root.

    Args:
        config: The validated global configuration.

    Raises:
        RuntimeError: If the interpreter is too old.
    """
    check_minimum_python()

    log_file = None
    if config.log_file is not None:
        log_file = Path(config.log_file)

    configure_loggers("g3release", log_level=config.log_level, log_file=log_file)
    logger = get_logger("g3release.runtime", log_level=config.log_level, log_file=log_file)

    source_root = Path(config.source_root).resolve()
    system_info = get_system_info()
    logger.debug(
        "g3release bootstrap complete",
        extra={
            "project": config.project_name,
            "source_root": str(source_root),
            "python_version": system_info.python_version,
            "platform": system_info.platform,
            "architecture": system_info.architecture,
        },
    )
    return source_root

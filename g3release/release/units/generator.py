# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Unit Generator: expands the systemd template unit for a package.

The template (service/<pkg>@.service.in) names the binary through a
placeholder and the instance through systemd's own `%i`:

    ExecStart=@BIN_PATH@ -c /etc/g3proxy/%i/main.yaml -s -G %i

We substitute @BIN_PATH@ (and @BIN_DIR@ when used) with plain string
replacement. `%i` is left for systemd to resolve when `g3proxy@foo.service`
is started; resolving it here would turn the template into a single unit.
"""

import logging
from pathlib import Path, PurePosixPath

from g3release.logging.logger import get_logger
from g3release.release.exceptions import TemplateError
from g3release.utils.filesystem import atomic_write

_logger: logging.Logger = get_logger(__name__)

BIN_PATH_PLACEHOLDER = "@BIN_PATH@"
BIN_DIR_PLACEHOLDER = "@BIN_DIR@"
INSTANCE_PLACEHOLDER = "%i"


def expand_text(template: str, binary_install_path: str, source: object = "<template>") -> str:
    """
    Substitute the binary path into template text.

    Raises:
        TemplateError: If the template lacks @BIN_PATH@ or `%i`.
    """
    if BIN_PATH_PLACEHOLDER not in template:
        raise TemplateError(
            f"Template {source} has no {BIN_PATH_PLACEHOLDER} placeholder; "
            f"it does not match this generator"
        )
    if INSTANCE_PLACEHOLDER not in template:
        raise TemplateError(
            f"Template {source} has no {INSTANCE_PLACEHOLDER} instance placeholder; "
            f"it is not a template unit"
        )

    bin_dir = str(PurePosixPath(binary_install_path).parent)
    text = template.replace(BIN_PATH_PLACEHOLDER, binary_install_path)
    return text.replace(BIN_DIR_PLACEHOLDER, bin_dir)


def expand(template_path: Path, binary_install_path: str) -> str:
    """
    Read a unit template and return the expanded unit text.

    Raises:
        TemplateError: If the template is missing or lacks a placeholder.
    """
    if not template_path.is_file():
        raise TemplateError(f"Service template not found: {template_path}")
    template = template_path.read_text(encoding="utf-8")
    return expand_text(template, binary_install_path, source=template_path)


def write_unit(text: str, unit_dir: Path, unit_name: str) -> Path:
    """Write the expanded unit atomically and return its path."""
    unit_path = unit_dir / unit_name
    atomic_write(unit_path, text)
    _logger.info("Generated service unit", extra={"unit": str(unit_path)})
    return unit_path

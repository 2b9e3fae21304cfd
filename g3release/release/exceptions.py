# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Error taxonomy for the release subsystem.

Every failure here stems from static misconfiguration: a missing build-time
dependency, a metadata file without its anchor, a template that doesn't match
the generator. None of them is retryable, so all of them abort the run and
the CLI maps each class to an exit code.
"""


class ReleaseError(Exception):
    """Base for all release packaging errors."""


class ConfigurationError(ReleaseError):
    """
    A build-time dependency or probe result is missing or invalid.

    Examples: no usable SSL backend, a malformed Lua version string, a package
    directory that doesn't exist. Raised before any file is touched.
    """


class FormatError(ReleaseError):
    """
    An expected anchor is missing from a metadata file.

    Carries the file and the anchor so the diagnostic names exactly what was
    not found. Raised before any write completes.
    """

    def __init__(self, path: object, anchor: str, detail: str = "") -> None:
        self.path = str(path)
        self.anchor = anchor
        message = f"Missing anchor '{anchor}' in {self.path}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class TemplateError(ReleaseError):
    """A service unit template is missing a placeholder the generator relies on."""


class BuildError(ReleaseError):
    """The external toolchain invocation failed or could not be started."""


class InstallError(ReleaseError):
    """A staging-tree copy could not be completed."""

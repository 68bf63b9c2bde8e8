"""Error types raised while generating code.

Resolution errors are fatal to one artifact only; the driver records them
and carries on. Configuration errors abort the whole run.
"""

from __future__ import annotations


class GeneratorError(Exception):
    """Base class for all generator errors."""


class ResolutionError(GeneratorError):
    """A schema reference points at a name that is not in the name table."""

    def __init__(self, reference: str, artifact: str | None = None) -> None:
        self.reference = reference
        self.artifact = artifact
        if artifact:
            message = f"{artifact}: unknown schema reference {reference!r}"
        else:
            message = f"unknown schema reference {reference!r}"
        super().__init__(message)

    def for_artifact(self, artifact: str) -> ResolutionError:
        """Return a copy of this error attributed to the given artifact."""
        if self.artifact:
            return self
        return ResolutionError(self.reference, artifact)


class ConfigurationError(GeneratorError):
    """The run configuration is broken (bad pattern, path/param mismatch)."""


class DescriptorError(GeneratorError):
    """Descriptor input could not be read or parsed."""

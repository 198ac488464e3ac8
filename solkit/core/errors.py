"""Error taxonomy shared by the solkit core and CLI."""
from pathlib import Path
from typing import Optional, Union


class SolkitError(Exception):
    """Base class for errors raised by solkit."""


class MalformedManifest(SolkitError):
    """A manifest file is not well-formed XML."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: malformed manifest ({reason})")


class ManifestIOError(SolkitError, OSError):
    """Reading, writing or enumerating a path failed (permission, lock, missing)."""

    def __init__(self, path: Union[str, Path], reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class AggregatorError(SolkitError):
    """The external aggregator (solution tool) reported a failure."""

    def __init__(self, identifier: Optional[str], reason: str):
        self.identifier = identifier
        self.reason = reason
        if identifier:
            super().__init__(f"{identifier}: {reason}")
        else:
            super().__init__(reason)


class MemberNotFound(AggregatorError):
    """The member to remove is not in the aggregator."""


class SyncTimeout(AggregatorError):
    """The whole-operation deadline for a membership sync expired."""


class ArgumentError(SolkitError):
    """Invalid command line input; raised before any mutation."""


class ConfigValidationError(SolkitError):
    """The workspace configuration file is invalid."""

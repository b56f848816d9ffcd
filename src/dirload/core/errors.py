"""Exception types for directory loading and resolution."""

from pathlib import Path


class DirloadError(Exception):
    """Base exception for dirload errors."""

    pass


class ConfigurationError(DirloadError, ValueError):
    """Invalid walk configuration (bad visitor, ambiguous index entries, unknown format)."""

    pass


class ArtifactNotFoundError(DirloadError, FileNotFoundError):
    """The exact path handed to a loading primitive is not an existing file.

    The resolver only moves on to its next candidate when this error is
    raised for the candidate it probed. A not-found raised for any other
    path (e.g. a nested load performed by the module being loaded) is a
    genuine load failure.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(f"Cannot find artifact '{self.path}'")

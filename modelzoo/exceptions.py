"""
Exception types raised by ModelZoo.
"""


class ModelZooError(Exception):
    """Base class for all model zoo errors."""


class InvalidRepositoryError(ModelZooError, ValueError):
    """Repository name or URL cannot be used."""


class UnknownModelFamilyError(ModelZooError, KeyError):
    """Lookup with an identifier outside the supported model families."""

    def __str__(self):
        # KeyError quotes its argument; keep the plain message.
        return str(self.args[0]) if self.args else ""


class ModelNotFoundError(ModelZooError):
    """No artifact in the repository matches the request."""


class DownloadError(ModelZooError):
    """A repository resource could not be fetched or failed verification."""

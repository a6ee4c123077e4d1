"""Exception types raised while adding keys to Lokalise."""
from typing import List, Optional


class LokaliseKeysError(Exception):
    """Base class for every error the tool reports to the user."""


class ParseError(LokaliseKeysError):
    """The input file is not valid YAML or does not have the expected shape."""


class AuthError(LokaliseKeysError):
    """The API token is missing or was rejected by Lokalise."""


class RemoteError(LokaliseKeysError):
    """Lokalise answered with a non-success status, or could not be reached."""

    def __init__(self, status_code: Optional[int], body: str):
        self.status_code = status_code
        self.body = body
        if status_code is None:
            message = f"Request to Lokalise failed: {body}"
        else:
            message = f"Lokalise returned HTTP {status_code}: {body}"
        super().__init__(message)


class ProjectNotFoundError(LokaliseKeysError):
    """No project with the requested name or id exists."""


class UnsupportedKeyError(LokaliseKeysError):
    """A key in the project uses different names per platform."""


class DuplicateKeyError(LokaliseKeysError):
    """Some keys from the input file already exist in the project."""

    def __init__(self, key_names: List[str]):
        self.key_names = key_names
        joined = ", ".join(f"`{name}`" for name in key_names)
        super().__init__(f"The following key(s) already exist: {joined}")

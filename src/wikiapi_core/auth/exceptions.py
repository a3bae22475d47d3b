"""Exceptions raised while resolving connection settings and credentials."""


class CredentialError(Exception):
    """Base exception for credential and settings resolution."""

    pass


class CredentialNotFoundError(CredentialError):
    """A required setting could not be resolved from any source.

    Attributes:
        env_var_name: The environment variable that was checked (if any).
    """

    def __init__(self, message: str, env_var_name: str | None = None):
        super().__init__(message)
        self.env_var_name = env_var_name


class CredentialFileError(CredentialError):
    """A credential file could not be read."""

    pass

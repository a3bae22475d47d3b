"""Connection settings and login credentials.

Values come from explicit arguments, environment variables or a ``.env``
file:

- ``WIKIAPI_URL``: base URL of the wiki (``api.php`` lives below it)
- ``WIKIAPI_USERNAME`` / ``WIKIAPI_PASSWORD``: login credentials
- ``WIKIAPI_PASSWORD_FILE``: file holding the password
"""

from wikiapi_core.auth.credentials import (
    PASSWORD_ENV,
    PASSWORD_FILE_ENV,
    URL_ENV,
    USERNAME_ENV,
    CredentialResolver,
)
from wikiapi_core.auth.exceptions import (
    CredentialError,
    CredentialFileError,
    CredentialNotFoundError,
)

__all__ = [
    "PASSWORD_ENV",
    "PASSWORD_FILE_ENV",
    "URL_ENV",
    "USERNAME_ENV",
    "CredentialError",
    "CredentialFileError",
    "CredentialNotFoundError",
    "CredentialResolver",
]

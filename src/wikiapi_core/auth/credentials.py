"""Multi-source resolution of wiki connection settings and credentials.

Resolution order (highest to lowest priority):
1. Explicitly provided value
2. Environment variable
3. .env file (python-dotenv)
4. Default value

Example:
    ```python
    from wikiapi_core.auth import CredentialResolver

    resolver = CredentialResolver()
    username = resolver.resolve(env_var_name=USERNAME_ENV, required=True)
    password = resolver.resolve(env_var_name=PASSWORD_ENV) or resolver.resolve_from_file(
        env_var_name=PASSWORD_FILE_ENV, required=True
    )
    ```

Credential values are never logged; only their source is.
"""

import logging
import os
from pathlib import Path
from threading import Lock

from dotenv import load_dotenv

from wikiapi_core.auth.exceptions import CredentialFileError, CredentialNotFoundError

logger = logging.getLogger(__name__)

URL_ENV = "WIKIAPI_URL"
USERNAME_ENV = "WIKIAPI_USERNAME"
PASSWORD_ENV = "WIKIAPI_PASSWORD"
PASSWORD_FILE_ENV = "WIKIAPI_PASSWORD_FILE"


class CredentialResolver:
    """Resolve settings from explicit values, the environment, .env and defaults.

    Args:
        dotenv_path: Path to .env file. If None, python-dotenv searches parent
            directories.
        load_dotenv: Whether to load the .env file at all.
    """

    def __init__(self, dotenv_path: str | None = None, load_dotenv: bool = True):
        self._dotenv_loaded = False
        self._dotenv_lock = Lock()
        self._dotenv_path = dotenv_path
        self._load_dotenv_enabled = load_dotenv

        if self._load_dotenv_enabled:
            self._ensure_dotenv_loaded()

    def _ensure_dotenv_loaded(self) -> None:
        """Load the .env file once (thread-safe)."""
        if self._dotenv_loaded:
            return

        with self._dotenv_lock:
            if self._dotenv_loaded:
                return

            try:
                load_dotenv(dotenv_path=self._dotenv_path)
                logger.debug("Loaded .env file for credential resolution")
            except OSError as e:
                logger.warning(f"Failed to load .env file: {e}")
            self._dotenv_loaded = True

    def resolve(
        self,
        *,
        value: str | None = None,
        env_var_name: str | None = None,
        default: str | None = None,
        required: bool = False,
        mask_in_logs: bool = True,
    ) -> str | None:
        """Resolve a setting from multiple sources.

        Args:
            value: Explicitly provided value (highest priority).
            env_var_name: Environment variable name to check. Values loaded
                from .env are visible here as well.
            default: Default value if not found elsewhere.
            required: If True, raises CredentialNotFoundError when nothing
                resolves.
            mask_in_logs: Mask the value in debug logs. Disable for
                non-sensitive settings such as the API URL.

        Returns:
            Resolved value, or None if not found and not required.

        Raises:
            CredentialNotFoundError: If required=True and nothing resolves.
        """
        result = None
        source = None

        if value is not None:
            result = value
            source = "explicit parameter"
        elif env_var_name and env_var_name in os.environ:
            result = os.environ[env_var_name]
            source = f"environment variable '{env_var_name}'"
        elif default is not None:
            result = default
            source = "default value"

        if result is not None:
            shown = "***" if mask_in_logs else result
            logger.debug(f"Resolved setting from {source}: {shown}")

        if required and result is None:
            error_msg = "Required credential not found"
            if env_var_name:
                error_msg += f" (checked env var: {env_var_name})"
            raise CredentialNotFoundError(error_msg, env_var_name=env_var_name)

        return result

    def resolve_from_file(
        self,
        *,
        file_path: str | Path | None = None,
        env_var_name: str | None = None,
        required: bool = False,
    ) -> str | None:
        """Read a credential from a file.

        ``~`` and ``$VAR`` are expanded in the path; the file content is
        stripped of surrounding whitespace.

        Args:
            file_path: Path to the file.
            env_var_name: Environment variable holding the path, used when
                ``file_path`` is None.
            required: If True, raises CredentialFileError when the file
                cannot be read.

        Returns:
            File contents, or None if unavailable and not required.

        Raises:
            CredentialFileError: If required=True and the file cannot be read.
        """
        path_to_use = None

        if file_path is not None:
            path_to_use = str(file_path)
        elif env_var_name:
            path_to_use = self.resolve(env_var_name=env_var_name, mask_in_logs=False)

        if not path_to_use:
            if required:
                error_msg = "No file path provided for credential resolution"
                if env_var_name:
                    error_msg += f" (env var '{env_var_name}' not set)"
                raise CredentialFileError(error_msg)
            return None

        path_obj = Path(os.path.expanduser(os.path.expandvars(path_to_use)))

        try:
            content = path_obj.read_text().strip()
        except FileNotFoundError:
            error_msg = f"Credential file not found: {path_obj}"
            if required:
                raise CredentialFileError(error_msg) from None
            logger.debug(error_msg)
            return None
        except OSError as e:
            error_msg = f"Error reading credential file {path_obj}: {e}"
            if required:
                raise CredentialFileError(error_msg) from e
            logger.warning(error_msg)
            return None

        logger.debug(f"Resolved credential from file: {path_obj} (***)")
        return content

"""Key/value secret client backed by the Vault-compatible secret store."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import hvac
from hvac.exceptions import Forbidden, InvalidPath, Unauthorized, VaultError

from cerberus_client.errors import CerberusError, UnauthorizedError

PATH_PREFIX = "secret/"


class Secret:
    """Wraps the hvac client so every path is prefixed with ``secret/``.

    Paths should not start with a ``/``. Unwrapping is not exposed because
    it does not work with Cerberus path routing.
    """

    def __init__(self, vault_client: hvac.Client):
        self._vault = vault_client

    def read(self, path: str) -> dict[str, Any] | None:
        """Return the secret at ``path``, or None if nothing is stored there."""
        return self._call(self._vault.read, PATH_PREFIX + path)

    def list(self, path: str) -> dict[str, Any] | None:
        """List the keys below ``path``, or None if there are none."""
        return self._call(self._vault.list, PATH_PREFIX + path)

    def write(self, path: str, data: dict[str, Any]) -> Any:
        """Create or replace the secret at ``path``."""
        return self._call(self._vault.write_data, PATH_PREFIX + path, data=data)

    def delete(self, path: str) -> Any:
        return self._call(self._vault.delete, PATH_PREFIX + path)

    def _call(self, method: Callable[..., Any], path: str, **kwargs: Any) -> Any:
        try:
            return method(path, **kwargs)
        except InvalidPath:
            return None
        except (Unauthorized, Forbidden) as e:
            raise UnauthorizedError(f"Access denied to secret '{path}': {e}") from e
        except VaultError as e:
            raise CerberusError(f"Secret store error: {e}") from e

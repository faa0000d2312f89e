"""Role client."""

from __future__ import annotations

import httpx

from cerberus_client.api import Role as RoleModel
from cerberus_client.resources.base import Resource

ROLE_BASE_PATH = "/v1/role"


class Role(Resource):
    """Reads the roles that can be granted on a safe deposit box."""

    def list(self) -> list[RoleModel]:
        response = self._client.do_request("GET", ROLE_BASE_PATH)
        if response.status_code != httpx.codes.OK:
            raise self._unexpected_status(response, "GET roles")
        return self._parse_list(response, RoleModel)

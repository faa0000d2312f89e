"""Safe deposit box client."""

from __future__ import annotations

import httpx

from cerberus_client.api import SafeDepositBox
from cerberus_client.errors import SafeDepositBoxNotFoundError
from cerberus_client.resources.base import Resource
from cerberus_client.utils import parse_api_error

SDB_BASE_PATH = "/v2/safe-deposit-box"


class SDB(Resource):
    """Manages and reads safe deposit boxes."""

    def get_by_name(self, name: str) -> SafeDepositBox:
        """Locate a box by name among the boxes the caller can see.

        Raises:
            SafeDepositBoxNotFoundError: If the name is blank or no visible box has it
        """
        if not name.strip():
            raise SafeDepositBoxNotFoundError()
        for box in self.list():
            if box.name == name:
                return box
        raise SafeDepositBoxNotFoundError()

    def get(self, sdb_id: str) -> SafeDepositBox:
        """Return a single box by ID.

        Raises:
            SafeDepositBoxNotFoundError: If the ID is blank or does not exist
            CerberusRequestError: For any other non-200 status
        """
        sdb_id = sdb_id.strip()
        if not sdb_id:
            raise SafeDepositBoxNotFoundError()
        response = self._client.do_request("GET", f"{SDB_BASE_PATH}/{sdb_id}")
        if response.status_code == httpx.codes.NOT_FOUND:
            raise SafeDepositBoxNotFoundError()
        if response.status_code != httpx.codes.OK:
            raise self._unexpected_status(response, "GET SDB")
        return self._parse(response, SafeDepositBox)

    def list(self) -> list[SafeDepositBox]:
        """Return all boxes the authenticated caller is allowed to see."""
        response = self._client.do_request("GET", SDB_BASE_PATH)
        if response.status_code != httpx.codes.OK:
            raise self._unexpected_status(response, "GET SDB list")
        return self._parse_list(response, SafeDepositBox)

    def create(self, new_sdb: SafeDepositBox) -> SafeDepositBox:
        """Create a box and return the created object.

        Raises:
            APIError: If the server rejected the box, e.g. a missing name
            ErrorBodyNotReturnedError: On a 400 with no error details
            CerberusRequestError: For other failures
        """
        response = self._client.do_request("POST", SDB_BASE_PATH, data=new_sdb.to_request_body())
        if response.status_code == httpx.codes.BAD_REQUEST:
            raise parse_api_error(response)
        if response.status_code != httpx.codes.CREATED:
            raise self._api_error(response, "creating SDB")
        return self._parse(response, SafeDepositBox)

    def update(self, sdb_id: str, updated_sdb: SafeDepositBox) -> SafeDepositBox:
        """Update a box. Fields set on ``updated_sdb`` overwrite the current ones.

        Raises:
            SafeDepositBoxNotFoundError: If the ID is blank or does not exist
            APIError: If the server rejected the update
        """
        sdb_id = sdb_id.strip()
        if not sdb_id:
            raise SafeDepositBoxNotFoundError()
        response = self._client.do_request(
            "PUT", f"{SDB_BASE_PATH}/{sdb_id}", data=updated_sdb.to_request_body()
        )
        if response.status_code == httpx.codes.NOT_FOUND:
            raise SafeDepositBoxNotFoundError()
        if response.status_code == httpx.codes.BAD_REQUEST:
            raise parse_api_error(response)
        if response.status_code != httpx.codes.OK:
            raise self._api_error(response, "updating SDB")
        return self._parse(response, SafeDepositBox)

    def delete(self, sdb_id: str) -> None:
        """Delete the box with the given ID.

        Raises:
            SafeDepositBoxNotFoundError: If the ID is blank or does not exist
        """
        sdb_id = sdb_id.strip()
        if not sdb_id:
            raise SafeDepositBoxNotFoundError()
        response = self._client.do_request("DELETE", f"{SDB_BASE_PATH}/{sdb_id}")
        if response.status_code == httpx.codes.NOT_FOUND:
            raise SafeDepositBoxNotFoundError()
        if response.status_code != httpx.codes.NO_CONTENT:
            raise self._api_error(response, "deleting SDB")

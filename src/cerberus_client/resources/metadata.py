"""Safe deposit box metadata client."""

from __future__ import annotations

import httpx

from cerberus_client.api import MetadataResponse
from cerberus_client.resources.base import Resource
from cerberus_client.utils import parse_api_error

METADATA_BASE_PATH = "/v1/metadata"
DEFAULT_LIMIT = 100


class Metadata(Resource):
    """Pages through metadata for every safe deposit box."""

    def list(self, limit: int = DEFAULT_LIMIT, offset: int = 0) -> MetadataResponse:
        """Return one page of metadata.

        Args:
            limit: Page size. Zero means the default of 100.
            offset: Index of the first box to return

        Raises:
            APIError: If the server rejected the pagination values
            CerberusRequestError: For any other non-200 status
        """
        params = {"limit": str(limit or DEFAULT_LIMIT), "offset": str(offset)}
        response = self._client.do_request("GET", METADATA_BASE_PATH, params)
        if response.status_code == httpx.codes.BAD_REQUEST:
            raise parse_api_error(response)
        if response.status_code != httpx.codes.OK:
            raise self._unexpected_status(response, "GET metadata")
        return self._parse(response, MetadataResponse)

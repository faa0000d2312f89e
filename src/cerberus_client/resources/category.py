"""Category client."""

from __future__ import annotations

import httpx

from cerberus_client.api import Category as CategoryModel
from cerberus_client.resources.base import Resource

CATEGORY_BASE_PATH = "/v1/category"


class Category(Resource):
    """Reads the categories a safe deposit box can belong to."""

    def list(self) -> list[CategoryModel]:
        response = self._client.do_request("GET", CATEGORY_BASE_PATH)
        if response.status_code != httpx.codes.OK:
            raise self._unexpected_status(response, "GET categories")
        return self._parse_list(response, CategoryModel)

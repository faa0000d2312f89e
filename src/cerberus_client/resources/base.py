"""Shared plumbing for the resource clients."""

from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

import httpx
from pydantic import BaseModel, TypeAdapter, ValidationError

from cerberus_client.errors import CerberusError, CerberusRequestError, ErrorBodyNotReturnedError
from cerberus_client.utils import parse_api_error

if TYPE_CHECKING:
    from cerberus_client.client import CerberusClient

ModelT = TypeVar("ModelT", bound=BaseModel)


class Resource:
    """Base class for clients of a single Cerberus resource."""

    def __init__(self, client: CerberusClient):
        # a reference to the parent client
        self._client = client

    @staticmethod
    def _parse(response: httpx.Response, model: type[ModelT]) -> ModelT:
        try:
            return model.model_validate_json(response.content)
        except ValidationError as e:
            raise CerberusRequestError(
                f"Error while parsing response from Cerberus: {e}", response=response
            ) from e

    @staticmethod
    def _parse_list(response: httpx.Response, model: type[ModelT]) -> list[ModelT]:
        try:
            return TypeAdapter(list[model]).validate_json(response.content)
        except ValidationError as e:
            raise CerberusRequestError(
                f"Error while parsing response from Cerberus: {e}", response=response
            ) from e

    @staticmethod
    def _unexpected_status(response: httpx.Response, action: str) -> CerberusRequestError:
        return CerberusRequestError(
            f"Error while trying to {action}. Got HTTP status code {response.status_code}",
            response=response,
        )

    @staticmethod
    def _api_error(response: httpx.Response, action: str) -> CerberusError:
        """Prefer the server's error envelope, falling back to the status code."""
        error = parse_api_error(response)
        if isinstance(error, ErrorBodyNotReturnedError):
            return CerberusRequestError(
                f"Error while {action}. Got HTTP status code {response.status_code}. {error}",
                response=response,
            )
        return error

"""Secure file client."""

from __future__ import annotations

import posixpath
from typing import BinaryIO

import httpx

from cerberus_client.api import SecureFilesResponse
from cerberus_client.errors import SecureFileNotFoundError
from cerberus_client.resources.base import Resource

SECURE_FILE_BASE_PATH = "/v1/secure-file"
SECURE_FILE_LIST_BASE_PATH = "/v1/secure-files"
UPLOAD_FIELD = "file-content"
CHUNK_SIZE = 64 * 1024


def _join(base: str, path: str) -> str:
    return posixpath.normpath(posixpath.join(base, path.lstrip("/")))


class SecureFile(Resource):
    """Lists, downloads and uploads secure files."""

    def list(self, root_path: str) -> SecureFilesResponse:
        """Return summaries of the secure files under ``root_path``."""
        # Cerberus expects a trailing slash on the listing path
        path = _join(SECURE_FILE_LIST_BASE_PATH, root_path) + "/"
        response = self._client.do_request("GET", path, {"list": "true"})
        if response.status_code != httpx.codes.OK:
            raise self._unexpected_status(response, "list secure files")
        return self._parse(response, SecureFilesResponse)

    def get(self, secure_file_path: str, output: BinaryIO) -> None:
        """Download a secure file, writing its content to ``output``.

        Raises:
            SecureFileNotFoundError: If there is no file at that path
            CerberusRequestError: For any other non-200 status
        """
        response = self._client.do_request(
            "GET", _join(SECURE_FILE_BASE_PATH, secure_file_path), stream=True
        )
        try:
            if response.status_code == httpx.codes.NOT_FOUND:
                raise SecureFileNotFoundError(f"Unable to find secure file {secure_file_path}")
            if response.status_code != httpx.codes.OK:
                raise self._unexpected_status(response, f"download secure file {secure_file_path}")
            for chunk in response.iter_bytes(CHUNK_SIZE):
                output.write(chunk)
        finally:
            response.close()

    def put(self, secure_file_path: str, filename: str, content: BinaryIO) -> None:
        """Upload ``content`` as a multipart form to ``secure_file_path``."""
        response = self._client.do_request_with_body(
            "POST",
            _join(SECURE_FILE_BASE_PATH, secure_file_path),
            files={UPLOAD_FIELD: (filename, content)},
        )
        # Success is an empty 204
        if response.status_code != httpx.codes.NO_CONTENT:
            raise self._unexpected_status(response, f"upload secure file {secure_file_path}")

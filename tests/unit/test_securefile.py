"""Tests for the secure file client."""

from __future__ import annotations

import io
import json

import pytest

from cerberus_client.errors import CerberusRequestError, SecureFileNotFoundError
from tests.helpers import MockServer

FILES_JSON = {
    "has_next": False,
    "next_offset": None,
    "limit": 100,
    "offset": 0,
    "file_count_in_result": 1,
    "total_file_count": 1,
    "secure_file_summaries": [
        {
            "sdbox_id": "a7d703da-faac-11e5-a8a9-7fa3b294cd46",
            "path": "app/stage/cert.pem",
            "size_in_bytes": 1024,
            "name": "cert.pem",
            "created_by": "john.doe@nike.com",
            "created_ts": "2017-10-18T20:33:41Z",
            "last_updated_by": "john.doe@nike.com",
            "last_updated_ts": "2017-10-18T20:33:41Z",
        }
    ],
}


class TestSecureFileList:
    """Tests for listing secure files."""

    def test_list(self, make_client):
        """Test the listing path ends in a slash and asks for a listing."""
        server = MockServer(body=json.dumps(FILES_JSON))

        files = make_client(server).secure_file().list("app/stage")

        assert files.total_file_count == 1
        assert files.secure_file_summaries[0].name == "cert.pem"
        assert server.last_request.url.path == "/v1/secure-files/app/stage/"
        assert server.last_request.url.params["list"] == "true"

    def test_list_leading_slash(self, make_client):
        """Test a leading slash does not escape the listing path."""
        server = MockServer(body=json.dumps(FILES_JSON))

        make_client(server).secure_file().list("/app/stage/")

        assert server.last_request.url.path == "/v1/secure-files/app/stage/"

    def test_list_error(self, make_client):
        with pytest.raises(CerberusRequestError):
            make_client(MockServer(status_code=500)).secure_file().list("app/stage")


class TestSecureFileGet:
    """Tests for downloading secure files."""

    def test_get_writes_content(self, make_client):
        """Test the file content is written to the output stream."""
        content = b"-----BEGIN CERTIFICATE-----\n" + b"A" * 200_000
        server = MockServer(body=content, headers={"Content-Type": "application/octet-stream"})
        output = io.BytesIO()

        make_client(server).secure_file().get("app/stage/cert.pem", output)

        assert output.getvalue() == content
        assert server.last_request.url.path == "/v1/secure-file/app/stage/cert.pem"

    def test_get_not_found(self, make_client):
        """Test a missing file raises SecureFileNotFoundError and writes nothing."""
        output = io.BytesIO()

        with pytest.raises(SecureFileNotFoundError):
            make_client(MockServer(status_code=404)).secure_file().get("app/stage/nope", output)

        assert output.getvalue() == b""

    def test_get_error(self, make_client):
        with pytest.raises(CerberusRequestError, match="500"):
            make_client(MockServer(status_code=500)).secure_file().get("app/x", io.BytesIO())


class TestSecureFilePut:
    """Tests for uploading secure files."""

    def test_put_sends_multipart(self, make_client):
        """Test the upload is a multipart form with the file-content field."""
        server = MockServer(status_code=204)

        make_client(server).secure_file().put(
            "app/stage/cert.pem", "cert.pem", io.BytesIO(b"certificate bytes")
        )

        request = server.last_request
        assert request.method == "POST"
        assert request.url.path == "/v1/secure-file/app/stage/cert.pem"
        assert request.headers["Content-Type"].startswith("multipart/form-data; boundary=")
        assert b'name="file-content"; filename="cert.pem"' in request.content
        assert b"certificate bytes" in request.content
        assert request.headers["X-Cerberus-Token"]

    def test_put_error(self, make_client):
        """Test any status other than 204 is a failure."""
        with pytest.raises(CerberusRequestError, match="200"):
            make_client(MockServer(status_code=200)).secure_file().put(
                "app/x", "x", io.BytesIO(b"x")
            )

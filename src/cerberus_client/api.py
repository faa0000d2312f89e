"""Cerberus API object definitions.

Only the objects the client needs are modelled. Unknown keys in responses
are ignored so newer servers keep working.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from cerberus_client import __version__

CLIENT_HEADER = f"CerberusPythonClient/{__version__}"


class CerberusModel(BaseModel):
    """Base model for API payloads."""

    model_config = ConfigDict(extra="ignore")


class AuthStatus(str, Enum):
    """Status of a user authentication response."""

    SUCCESS = "success"
    MFA_REQUIRED = "mfa_req"


class UserMetadata(CerberusModel):
    username: str = ""
    is_admin: str = ""
    groups: str = ""


class UserClientToken(CerberusModel):
    """Token issued by the user auth endpoints."""

    client_token: str
    policies: list[str] = Field(default_factory=list)
    metadata: UserMetadata = Field(default_factory=UserMetadata)
    lease_duration: int = 0
    renewable: bool = False


class MFADevice(CerberusModel):
    id: str
    name: str = ""


class UserAuthData(CerberusModel):
    client_token: UserClientToken | None = None
    user_id: str = ""
    username: str = ""
    state_token: str = ""
    devices: list[MFADevice] = Field(default_factory=list)


class UserAuthResponse(CerberusModel):
    """Response from ``/v2/auth/user``, ``/v2/auth/mfa_check`` and the refresh endpoint."""

    status: AuthStatus
    data: UserAuthData = Field(default_factory=UserAuthData)


class IAMAuthResponse(CerberusModel):
    """Response from ``/v2/auth/sts-identity``."""

    client_token: str
    policies: list[str] = Field(default_factory=list)
    metadata: dict[str, str] = Field(default_factory=dict)
    lease_duration: int = 0
    renewable: bool = False


class UserGroupPermission(CerberusModel):
    id: str | None = None
    name: str
    role_id: str


class IAMPrincipal(CerberusModel):
    id: str | None = None
    iam_principal_arn: str
    role_id: str


class SafeDepositBox(CerberusModel):
    """A named container of secrets."""

    id: str | None = None
    name: str | None = None
    description: str | None = None
    path: str | None = None
    category_id: str | None = None
    owner: str | None = None
    user_group_permissions: list[UserGroupPermission] = Field(default_factory=list)
    iam_principal_permissions: list[IAMPrincipal] = Field(default_factory=list)
    created_ts: datetime | None = None
    last_updated_ts: datetime | None = None
    created_by: str | None = None
    last_updated_by: str | None = None

    def to_request_body(self) -> dict[str, Any]:
        """Serialize for create and update calls, dropping unset values.

        Empty permission lists are dropped too, so a partial update leaves the
        box's permissions alone.
        """
        body = self.model_dump(mode="json", exclude_none=True)
        return {key: value for key, value in body.items() if value != []}


class Role(CerberusModel):
    """A permission level that can be granted on a safe deposit box."""

    id: str
    name: str
    created_ts: datetime | None = None
    last_updated_ts: datetime | None = None
    created_by: str | None = None
    last_updated_by: str | None = None


class Category(CerberusModel):
    id: str
    display_name: str
    path: str
    created_ts: datetime | None = None
    last_updated_ts: datetime | None = None
    created_by: str | None = None
    last_updated_by: str | None = None


class SDBMetadata(CerberusModel):
    name: str
    path: str
    category: str = ""
    owner: str = ""
    description: str = ""
    created_ts: datetime | None = None
    created_by: str = ""
    last_updated_ts: datetime | None = None
    last_updated_by: str = ""
    user_group_permissions: dict[str, str] = Field(default_factory=dict)
    iam_role_permissions: dict[str, str] = Field(default_factory=dict)


class MetadataResponse(CerberusModel):
    """A page of safe deposit box metadata."""

    has_next: bool = False
    next_offset: int | None = None
    limit: int = 0
    offset: int = 0
    sdb_count_in_result: int = 0
    total_sdbcount: int = 0
    safe_deposit_box_metadata: list[SDBMetadata] = Field(default_factory=list)


class SecureFileSummary(CerberusModel):
    sdbox_id: str
    path: str
    size_in_bytes: int
    name: str
    created_by: str = ""
    created_ts: datetime | None = None
    last_updated_by: str = ""
    last_updated_ts: datetime | None = None


class SecureFilesResponse(CerberusModel):
    """A page of secure file summaries."""

    has_next: bool = False
    next_offset: int | None = None
    limit: int = 0
    offset: int = 0
    file_count_in_result: int = 0
    total_file_count: int = 0
    secure_file_summaries: list[SecureFileSummary] = Field(default_factory=list)


class ErrorDetail(CerberusModel):
    """A single field-level error inside an API error envelope."""

    code: int = 0
    message: str = ""
    metadata: dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(CerberusModel):
    error_id: str = ""
    errors: list[ErrorDetail] = Field(default_factory=list)

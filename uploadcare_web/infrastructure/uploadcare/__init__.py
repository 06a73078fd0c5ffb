"""
Uploadcare REST API integration.

Includes a mock client for local development without credentials.
"""

from .client import (
    GroupApiClient,
    MockGroupApiClient,
    RestGroupApiClient,
    UploadcareApiError,
    UploadcareConfig,
    create_group_api_client,
)

__all__ = [
    "GroupApiClient",
    "MockGroupApiClient",
    "RestGroupApiClient",
    "UploadcareApiError",
    "UploadcareConfig",
    "create_group_api_client",
]

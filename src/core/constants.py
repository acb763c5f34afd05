"""Core constants used across dynoseed modules.

This module centralizes batch limits, retry defaults, and wire names.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

# DynamoDB BatchWriteItem accepts at most 25 put/delete requests per call.
MAX_CHUNK = 25
DEFAULT_RETRY_INCREMENT_MS = 1000
DEFAULT_RETRY_CEILING_MS = 5000
DEFAULT_READ_CHUNK_BYTES = 65536
RESOURCE_NOT_READY_CODE = "ResourceNotFoundException"
BUFFER_TYPE_TAG = "Buffer"
REQUEST_ITEMS_KEY = "RequestItems"
PUT_REQUEST_KEY = "PutRequest"
ITEM_KEY = "Item"
ENV_MAX_CHUNK = "DYNOSEED_MAX_CHUNK"
ENV_RETRY_INCREMENT_MS = "DYNOSEED_RETRY_INCREMENT_MS"
ENV_RETRY_CEILING_MS = "DYNOSEED_RETRY_CEILING_MS"
ENV_READ_CHUNK_BYTES = "DYNOSEED_READ_CHUNK_BYTES"

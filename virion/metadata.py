"""
virion/metadata.py
Token metadata and data-URI token URIs

Format: data:application/json;base64,<json>, where the JSON carries
name, description, image (preview data URI) and attributes.
"""

import base64
import binascii
import json
from typing import Optional

from .naming import strain_name, trait_attributes
from .preview import preview_data_uri
from .traits import derive_traits

TOKEN_URI_PREFIX = "data:application/json;base64,"

DESCRIPTION = (
    "A procedurally grown viral strain. Every trait is derived from the "
    "token ID, so the preview and the live organism always match."
)


def build_metadata(token_id: int, size: Optional[int] = None) -> dict:
    """Full metadata record for a token."""
    traits = derive_traits(token_id)
    return {
        "name": strain_name(traits.token_id),
        "description": DESCRIPTION,
        "image": preview_data_uri(traits, size),
        "attributes": trait_attributes(traits),
    }


def encode_token_uri(metadata: dict) -> str:
    """Metadata -> data:application/json;base64 URI."""
    raw = json.dumps(metadata, separators=(",", ":"), sort_keys=True).encode("utf-8")
    return TOKEN_URI_PREFIX + base64.b64encode(raw).decode("ascii")


def decode_token_uri(uri: str) -> dict:
    """
    Inverse of encode_token_uri.

    Raises:
        ValueError: not a base64 JSON data URI
    """
    if not uri.startswith(TOKEN_URI_PREFIX):
        raise ValueError("token URI is not a base64 JSON data URI")
    try:
        raw = base64.b64decode(uri[len(TOKEN_URI_PREFIX):], validate=True)
        return json.loads(raw.decode("utf-8"))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise ValueError(f"malformed token URI: {e}") from e


def decode_token_image(uri: str) -> Optional[str]:
    """Image field of a token URI, or None if the URI cannot be decoded."""
    try:
        return decode_token_uri(uri).get("image")
    except (ValueError, AttributeError):
        return None

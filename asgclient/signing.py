"""Query request signing, version 2 with HMAC-SHA256."""

from __future__ import annotations

import base64
import hashlib
import hmac
from dataclasses import dataclass
from typing import Dict, Mapping
from urllib.parse import quote


@dataclass(frozen=True)
class Credentials:
    """Access key pair, with an optional session token."""

    access_key: str
    secret_key: str
    token: str = ""


def encode(value: str) -> str:
    """Percent-encode everything except unreserved characters (A-Z a-z 0-9 - _ . ~)."""
    return quote(value, safe="")


def sign(
    credentials: Credentials,
    method: str,
    path: str,
    params: Mapping[str, str],
    host: str,
) -> Dict[str, str]:
    """Return a copy of ``params`` with the authentication fields and signature added."""
    signed = dict(params)
    signed["AWSAccessKeyId"] = credentials.access_key
    signed["SignatureVersion"] = "2"
    signed["SignatureMethod"] = "HmacSHA256"
    if credentials.token:
        signed["SecurityToken"] = credentials.token

    query = "&".join(
        sorted(f"{encode(key)}={encode(value)}" for key, value in signed.items())
    )
    payload = "\n".join((method, host, path, query))
    digest = hmac.new(
        credentials.secret_key.encode("utf-8"),
        payload.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    signed["Signature"] = base64.b64encode(digest).decode("ascii")
    return signed
"""Token Claims — tests for local ID token payload decode and admin policy.

Tests cover:
    - Payload segment decode with and without base64 padding
    - Malformed tokens yield None, never raise
    - Admin policy: only admin is True grants; debug bypass grants anything
"""

import base64
import json

import pytest

from sitedir.core.token_claims import decode_token_claims, has_admin_privilege


def _token(claims: object) -> str:
    def seg(data: bytes) -> str:
        return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")
    header = seg(json.dumps({"alg": "RS256"}).encode())
    return f"{header}.{seg(json.dumps(claims).encode())}.signature"


def test_decodes_payload_claims():
    claims = decode_token_claims(_token({"admin": True, "email": "a@example.com"}))
    assert claims == {"admin": True, "email": "a@example.com"}


@pytest.mark.parametrize("claims", [{"a": 1}, {"ab": 12}, {"abc": 123}])
def test_decodes_regardless_of_padding(claims):
    assert decode_token_claims(_token(claims)) == claims


@pytest.mark.parametrize("token", [
    "", "single-segment", "a..c", "a.!!!!.c", "a.bm90LWpzb24.c",
])
def test_malformed_tokens_yield_none(token):
    assert decode_token_claims(token) is None


def test_non_object_payload_yields_none():
    assert decode_token_claims(_token([1, 2, 3])) is None


@pytest.mark.parametrize("claims,expected", [
    ({"admin": True}, True),
    ({"admin": "true"}, False),
    ({"admin": 1}, False),
    ({}, False),
    (None, False),
])
def test_admin_policy(claims, expected):
    assert has_admin_privilege(claims) is expected


def test_debug_bypass_grants_without_claim():
    assert has_admin_privilege({}, debug_bypass=True) is True
    assert has_admin_privilege(None, debug_bypass=True) is True

"""Tests for fpp_api/common/hmac_validator.py"""

import hashlib
import hmac

import pytest

from fpp_api.common.hmac_validator import generate_local_hmac, stringify_query, validate_hmac
from fpp_api.errors import InvalidHmacError

SECRET = "test_api_secret"


def _query(**overrides):
    query = {
        "code": "auth_code",
        "shop": "test-shop.myfunpinpin.com",
        "state": "nonce123",
        "timestamp": "1650000000",
    }
    query.update(overrides)
    return query


class TestStringifyQuery:
    def test_sorts_keys(self):
        assert stringify_query({"b": "2", "a": "1"}) == "a=1&b=2"

    def test_none_encodes_empty_value(self):
        assert stringify_query({"a": "1", "b": None}) == "a=1&b="


class TestGenerateLocalHmac:
    def test_matches_manual_digest(self):
        message = "code=auth_code&shop=test-shop.myfunpinpin.com&state=nonce123&timestamp=1650000000"
        expected = hmac.new(SECRET.encode(), message.encode(), hashlib.sha256).hexdigest()
        assert generate_local_hmac(_query(), SECRET) == expected

    def test_includes_host_when_present(self):
        assert generate_local_hmac(_query(host="aG9zdA"), SECRET) != generate_local_hmac(_query(), SECRET)

    def test_ignores_unsigned_params(self):
        assert generate_local_hmac(_query(extra="x"), SECRET) == generate_local_hmac(_query(), SECRET)

    def test_missing_timestamp_signed_as_empty(self):
        query = _query()
        del query["timestamp"]
        message = "code=auth_code&shop=test-shop.myfunpinpin.com&state=nonce123&timestamp="
        expected = hmac.new(SECRET.encode(), message.encode(), hashlib.sha256).hexdigest()
        assert generate_local_hmac(query, SECRET) == expected


class TestValidateHmac:
    def test_valid(self):
        query = _query()
        query["hmac"] = generate_local_hmac(query, SECRET)
        assert validate_hmac(query, SECRET) is True

    def test_tampered(self):
        query = _query()
        query["hmac"] = generate_local_hmac(query, SECRET)
        query["code"] = "other_code"
        assert validate_hmac(query, SECRET) is False

    def test_wrong_secret(self):
        query = _query()
        query["hmac"] = generate_local_hmac(query, "other_secret")
        assert validate_hmac(query, SECRET) is False

    def test_missing_hmac_raises(self):
        with pytest.raises(InvalidHmacError):
            validate_hmac(_query(), SECRET)

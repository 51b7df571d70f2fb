"""Tests for fpp_api/context.py"""

import pytest

from fpp_api.auth.session_storage import MemorySessionStorage
from fpp_api.context import ApiVersion, Context
from fpp_api.errors import PrivateAppError, UninitializedContextError


def _context(**overrides):
    values = dict(api_key="key", api_secret_key="secret", scopes=["read_products"], host_name="app.example.com")
    values.update(overrides)
    return Context(**values)


class TestContext:
    def test_defaults(self):
        context = _context()
        assert context.api_version == ApiVersion.APRIL_22
        assert context.is_embedded_app is True
        assert context.is_private_app is False
        assert isinstance(context.session_storage, MemorySessionStorage)

    def test_version_string_coerced(self):
        assert _context(api_version="2022-01").api_version is ApiVersion.JANUARY_22

    def test_unknown_version(self):
        with pytest.raises(ValueError):
            _context(api_version="1999-01")

    def test_scopes_string_split(self):
        assert _context(scopes="read_products, write_products").scopes == ["read_products", "write_products"]

    def test_separate_contexts_do_not_share_state(self):
        a, b = _context(), _context()
        assert a.session_storage is not b.session_storage
        assert a.deprecation_log is not b.deprecation_log

    @pytest.mark.parametrize("field", ["api_key", "api_secret_key", "scopes", "host_name"])
    def test_uninitialized(self, field):
        context = _context(**{field: [] if field == "scopes" else ""})
        assert context.initialized is False
        with pytest.raises(UninitializedContextError):
            context.throw_if_uninitialized()

    def test_private_app_guard(self):
        _context().throw_if_private_app("nope")
        with pytest.raises(PrivateAppError, match="nope"):
            _context(is_private_app=True).throw_if_private_app("nope")

"""Tests for fpp_api/auth/session_utils.py"""

from datetime import datetime, timedelta, timezone

import pytest

from fpp_api.auth.session_utils import (
    delete_current_session,
    delete_offline_session,
    load_current_session,
    load_offline_session,
    store_session,
)
from fpp_api.common.network import IncomingRequest, ServerResponse
from fpp_api.errors import SessionNotFound, UninitializedContextError
from fpp_api.models import Session

SHOP = "test-shop.myfunpinpin.com"


def _bearer(token):
    return IncomingRequest(headers={"Authorization": f"Bearer {token}"})


class TestLoadCurrentSession:
    def test_embedded_online(self, embedded_context, storage, make_session_token):
        session = Session(id=f"{SHOP}_42", shop=SHOP, state="s", is_online=True)
        storage.store_session(session)

        assert load_current_session(embedded_context, _bearer(make_session_token()), ServerResponse()) is session

    def test_embedded_offline(self, embedded_context, storage, make_session_token):
        session = Session(id=f"offline_{SHOP}", shop=SHOP, state="s")
        storage.store_session(session)

        loaded = load_current_session(embedded_context, _bearer(make_session_token()), ServerResponse(), is_online=False)
        assert loaded is session

    def test_no_session_id(self, context):
        assert load_current_session(context, IncomingRequest(), ServerResponse()) is None

    def test_unknown_session(self, embedded_context, make_session_token):
        assert load_current_session(embedded_context, _bearer(make_session_token()), ServerResponse()) is None

    def test_uninitialized(self, context):
        context.host_name = ""
        with pytest.raises(UninitializedContextError):
            load_current_session(context, IncomingRequest(), ServerResponse())


class TestOfflineSessions:
    def test_load(self, context, storage):
        session = Session(id=f"offline_{SHOP}", shop=SHOP, state="s")
        storage.store_session(session)
        assert load_offline_session(context, SHOP) is session

    def test_expired_hidden_by_default(self, context, storage):
        session = Session(
            id=f"offline_{SHOP}", shop=SHOP, state="s",
            expires=datetime.now(timezone.utc) - timedelta(minutes=1),
        )
        storage.store_session(session)

        assert load_offline_session(context, SHOP) is None
        assert load_offline_session(context, SHOP, include_expired=True) is session

    def test_delete(self, context, storage):
        storage.store_session(Session(id=f"offline_{SHOP}", shop=SHOP, state="s"))
        assert delete_offline_session(context, SHOP) is True
        assert storage.load_session(f"offline_{SHOP}") is None


class TestDeleteCurrentSession:
    def test_deletes(self, embedded_context, storage, make_session_token):
        storage.store_session(Session(id=f"{SHOP}_42", shop=SHOP, state="s", is_online=True))

        assert delete_current_session(embedded_context, _bearer(make_session_token()), ServerResponse()) is True
        assert storage.load_session(f"{SHOP}_42") is None

    def test_no_session_id(self, context):
        with pytest.raises(SessionNotFound):
            delete_current_session(context, IncomingRequest(), ServerResponse())


class TestStoreSession:
    def test_store(self, context, storage):
        session = Session(id="abc", shop=SHOP, state="s")
        assert store_session(context, session) is True
        assert storage.load_session("abc") is session

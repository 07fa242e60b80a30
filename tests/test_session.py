# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Tests for form sessions."""

from conftest import new_store

from pdfformkit.forms import FormEnvironment


class TestFormEnvironment:
    """Session lifecycle."""

    def test_init_is_idempotent(self) -> None:
        store = new_store()
        env = FormEnvironment()
        first = env.init_session(store)
        assert env.init_session(store) is first
        assert first.active
        assert first.belongs_to(store)

    def test_session_for(self) -> None:
        store = new_store()
        env = FormEnvironment()
        assert env.session_for(store) is None
        session = env.init_session(store)
        assert env.session_for(store) is session

    def test_sessions_are_per_document(self) -> None:
        env = FormEnvironment()
        a, b = new_store(), new_store()
        session_a = env.init_session(a)
        assert env.init_session(b) is not session_a
        assert not session_a.belongs_to(b)

    def test_close_session(self) -> None:
        store = new_store()
        env = FormEnvironment()
        session = env.init_session(store)
        session.close()
        assert not session.active
        assert env.session_for(store) is None
        assert env.init_session(store) is not session

    def test_closing_stale_session_keeps_new_one(self) -> None:
        store = new_store()
        env = FormEnvironment()
        old = env.init_session(store)
        env.close_session(store)
        new = env.init_session(store)
        old.close()
        assert new.active

    def test_closed_document_ends_session(self) -> None:
        store = new_store()
        session = FormEnvironment().init_session(store)
        store.close()
        assert not session.active

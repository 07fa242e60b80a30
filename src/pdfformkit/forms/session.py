# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Interactive-form session tracking.

A FormEnvironment is created by the embedding application and passed
explicitly to widget creation. It records which documents have an active
form session; widgets can only be created for those documents.
"""

from __future__ import annotations

import logging
import threading
import weakref

from ..store import DocumentStore

logger = logging.getLogger(__name__)


class FormSession:
    """Per-document interactive-form state."""

    def __init__(self, environment: FormEnvironment, store: DocumentStore) -> None:
        self._environment = environment
        self._store_ref = weakref.ref(store)
        self._active = True

    @property
    def active(self) -> bool:
        store = self._store_ref()
        return self._active and store is not None and not store.closed

    def belongs_to(self, store: DocumentStore) -> bool:
        return self._store_ref() is store

    def close(self) -> None:
        """Ends the session; later widget creation is refused."""
        store = self._store_ref()
        if store is not None and self._environment.session_for(store) is self:
            self._environment.close_session(store)
        self._active = False


class FormEnvironment:
    """Registry of active form sessions, one per document."""

    def __init__(self) -> None:
        self._sessions: weakref.WeakKeyDictionary[DocumentStore, FormSession] = (
            weakref.WeakKeyDictionary()
        )
        self._lock = threading.Lock()

    def init_session(self, store: DocumentStore) -> FormSession:
        """Starts a session for ``store``, or returns the active one."""
        with self._lock:
            session = self._sessions.get(store)
            if session is not None and session.active:
                return session
            session = FormSession(self, store)
            self._sessions[store] = session
            logger.debug("Form session initialized")
            return session

    def session_for(self, store: DocumentStore) -> FormSession | None:
        with self._lock:
            session = self._sessions.get(store)
            if session is not None and session.active:
                return session
            return None

    def close_session(self, store: DocumentStore) -> None:
        with self._lock:
            session = self._sessions.pop(store, None)
        if session is not None:
            session._active = False
            logger.debug("Form session closed")

# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Undo log for multi-step edits of existing PDF objects."""

from collections.abc import Callable
from typing import Any

from pikepdf import Array, Dictionary, Name

from ..store import remove_reference
from ..utils import resolve_indirect as _resolve


class UndoLog:
    """Records how to revert changes made to pre-existing objects."""

    def __init__(self) -> None:
        self._steps: list[Callable[[], None]] = []

    def set(self, container: Dictionary, key: str, value: Any) -> None:
        name = Name(key)
        if name in container:
            old = container[name]

            def restore(container=container, name=name, old=old):
                container[name] = old

        else:

            def restore(container=container, name=name):
                if name in container:
                    del container[name]

        self._steps.append(restore)
        container[name] = value

    def delete(self, container: Dictionary, key: str) -> None:
        name = Name(key)
        if name not in container:
            return
        old = container[name]

        def restore(container=container, name=name, old=old):
            container[name] = old

        self._steps.append(restore)
        del container[name]

    def append(self, container: Dictionary, key: str, item: Any) -> None:
        name = Name(key)
        arr = container.get(name)
        arr = _resolve(arr) if arr is not None else None
        if not isinstance(arr, Array):
            self.set(container, key, Array())
            arr = container[name]
        arr.append(item)

        def restore(container=container, name=name, item=item):
            remove_reference(container, name, item)

        self._steps.append(restore)

    def replace(self, arr: Array, index: int, item: Any) -> None:
        old = arr[index]

        def restore(arr=arr, index=index, old=old):
            arr[index] = old

        self._steps.append(restore)
        arr[index] = item

    def rollback(self) -> None:
        for step in reversed(self._steps):
            step()
        self._steps.clear()

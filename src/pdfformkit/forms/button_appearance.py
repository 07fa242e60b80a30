# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""On/off state appearances for checkboxes and radio buttons."""

import math

from pikepdf import Dictionary, Name

from ..geometry import Rect
from ..store import DocumentStore
from ..utils import format_number as _f
from ..utils import make_form_stream
from ..utils import resolve_indirect as _resolve

OFF_STATE = "Off"
CHECKBOX_ON_STATE = "Yes"
BORDER_WIDTH = 1.0

# Bezier control point factor for circle approximation
_KAPPA = 4.0 * (math.sqrt(2) - 1) / 3.0


def radio_on_state(position: int) -> str:
    """On-state name of the ``position``-th (1-based) radio in a group."""
    return f"Choice{position}"


def on_state_names(widget: Dictionary) -> list[str]:
    """Names of the non-Off states in a widget's /AP /N dictionary."""
    ap = _resolve(widget.get(Name.AP))
    if not isinstance(ap, Dictionary):
        return []
    normal = _resolve(ap.get(Name.N))
    if not isinstance(normal, Dictionary):
        return []
    return [key[1:] for key in normal.keys() if key != "/" + OFF_STATE]


def _circle_path(cx: float, cy: float, r: float) -> str:
    """Path operators for a circle built from four Bezier arcs."""
    k = _KAPPA * r
    return "\n".join(
        [
            f"{_f(cx + r)} {_f(cy)} m",
            f"{_f(cx + r)} {_f(cy + k)} {_f(cx + k)} {_f(cy + r)} {_f(cx)} {_f(cy + r)} c",
            f"{_f(cx - k)} {_f(cy + r)} {_f(cx - r)} {_f(cy + k)} {_f(cx - r)} {_f(cy)} c",
            f"{_f(cx - r)} {_f(cy - k)} {_f(cx - k)} {_f(cy - r)} {_f(cx)} {_f(cy - r)} c",
            f"{_f(cx + k)} {_f(cy - r)} {_f(cx + r)} {_f(cy - k)} {_f(cx + r)} {_f(cy)} c",
        ]
    )


def _box(w: float, h: float) -> str:
    hw = BORDER_WIDTH / 2.0
    return (
        f"{_f(BORDER_WIDTH)} w\n0 G\n"
        f"{_f(hw)} {_f(hw)} {_f(w - BORDER_WIDTH)} {_f(h - BORDER_WIDTH)} re S"
    )


def build_checkbox_states(
    store: DocumentStore, rect: Rect, on_state: str = CHECKBOX_ON_STATE
) -> Dictionary:
    """Builds the {/Off, /<on_state>} appearance dictionary of a checkbox.

    Off shows an empty box, on adds a check mark.
    """
    w, h = rect.width, rect.height
    margin = max(BORDER_WIDTH + 1, 3)
    off_content = _box(w, h)
    on_content = (
        f"{off_content}\n"
        f"{_f(margin)} {_f(h * 0.5)} m "
        f"{_f(w * 0.4)} {_f(margin)} l "
        f"{_f(w - margin)} {_f(h - margin)} l S"
    )
    return _state_dict(store, w, h, off_content, on_content, on_state)


def build_radio_states(store: DocumentStore, rect: Rect, on_state: str) -> Dictionary:
    """Builds the {/Off, /<on_state>} appearance dictionary of a radio.

    Off shows an empty circle, on adds a filled dot. Boxes too small
    for a circle fall back to the checkbox drawing.
    """
    w, h = rect.width, rect.height
    cx, cy = w / 2.0, h / 2.0
    r = min(cx, cy) - BORDER_WIDTH
    if r < 1:
        r = min(cx, cy)
    if r < 0.5:
        return build_checkbox_states(store, rect, on_state)

    ring = _circle_path(cx, cy, r)
    off_content = f"{_f(BORDER_WIDTH)} w\n0 G\n{ring} S"
    on_content = f"{off_content}\n0 g\n{_circle_path(cx, cy, r * 0.4)} f"
    return _state_dict(store, w, h, off_content, on_content, on_state)


def _state_dict(store, w, h, off_content, on_content, on_state) -> Dictionary:
    result = Dictionary()
    result[Name("/" + OFF_STATE)] = make_form_stream(
        store.pdf, w, h, off_content.encode("latin-1")
    )
    result[Name("/" + on_state)] = make_form_stream(
        store.pdf, w, h, on_content.encode("latin-1")
    )
    return result

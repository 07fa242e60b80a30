# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""pdfformkit - Create PDF form widgets and vector annotation appearances."""

from importlib.metadata import PackageNotFoundError, version

from .annotations import AppearanceMode, apply_appearance, set_line, set_vertices
from .content_stream import build_stroke_stream
from .exceptions import (
    InternalFailureError,
    InvalidArgumentError,
    NotSupportedAnnotationTypeError,
    PDFFormKitError,
    ResourceUnavailableError,
)
from .forms import (
    FieldDescriptor,
    FieldType,
    FormEnvironment,
    FormSession,
    WidgetHandle,
    create_widget,
    describe,
    ensure_acroform,
    field_value,
    find_field,
    set_checked,
    set_field_value,
)
from .geometry import (
    BLACK,
    Close,
    Color,
    CurveTo,
    LineTo,
    MoveTo,
    Point,
    Rect,
    Stroke,
)
from .regeneration import (
    CoalescingRegenerator,
    NullRegenerator,
    RegenerationPolicy,
)
from .store import AnnotationHandle, DocumentStore, FieldHandle, Handle

try:
    __version__ = version("pdfformkit")
except PackageNotFoundError:
    __version__ = "unknown"

__all__ = [
    "__version__",
    # Geometry
    "Point",
    "MoveTo",
    "LineTo",
    "CurveTo",
    "Close",
    "Color",
    "BLACK",
    "Stroke",
    "Rect",
    "build_stroke_stream",
    # Store
    "DocumentStore",
    "Handle",
    "AnnotationHandle",
    "FieldHandle",
    "RegenerationPolicy",
    "CoalescingRegenerator",
    "NullRegenerator",
    # Forms
    "FieldType",
    "FieldDescriptor",
    "FormEnvironment",
    "FormSession",
    "WidgetHandle",
    "create_widget",
    "describe",
    "ensure_acroform",
    "find_field",
    "field_value",
    "set_field_value",
    "set_checked",
    # Annotations
    "AppearanceMode",
    "apply_appearance",
    "set_line",
    "set_vertices",
    # Exceptions
    "PDFFormKitError",
    "InvalidArgumentError",
    "NotSupportedAnnotationTypeError",
    "ResourceUnavailableError",
    "InternalFailureError",
]

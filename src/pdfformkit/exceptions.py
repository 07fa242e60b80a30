# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Custom exceptions for pdfformkit."""


class PDFFormKitError(Exception):
    """Base exception for all pdfformkit errors."""


class InvalidArgumentError(PDFFormKitError):
    """Argument rejected before any document mutation."""


class NotSupportedAnnotationTypeError(PDFFormKitError):
    """Operation does not apply to the annotation's subtype."""


class ResourceUnavailableError(PDFFormKitError):
    """Required form session or AcroForm is missing."""


class InternalFailureError(PDFFormKitError):
    """The document store rejected an allocation or write."""

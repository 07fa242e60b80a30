# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Utility functions shared by the form and annotation modules."""

import logging
import math
import sys
from typing import Any

from pikepdf import Array, Dictionary, Name, Pdf, Stream

from .exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Digits after the decimal point for every emitted content-stream number
NUMBER_PRECISION = 4


def setup_logging(verbose: bool = False, quiet: bool = False) -> logging.Logger:
    """Configures logging for pdfformkit.

    Args:
        verbose: If True, DEBUG level is used.
        quiet: If True, only ERROR and higher are output.
            Takes precedence over verbose.

    Returns:
        Configured logger for pdfformkit.
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    package_logger = logging.getLogger("pdfformkit")
    package_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    package_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)

    logger.debug("Logging configured with level: %s", logging.getLevelName(level))
    return package_logger


def resolve_indirect(obj: Any) -> Any:
    """Resolves an indirect PDF object reference.

    Args:
        obj: A pikepdf object that may be an indirect reference.

    Returns:
        The resolved object, or the original if not indirect.
    """
    try:
        return obj.get_object()
    except (AttributeError, TypeError, ValueError):
        return obj


def require_finite(*values: float, what: str = "coordinate") -> None:
    """Rejects NaN and infinite numbers.

    Args:
        *values: Numbers to check.
        what: Label used in the error message.

    Raises:
        InvalidArgumentError: If any value is NaN or infinite.
    """
    for value in values:
        if not math.isfinite(value):
            raise InvalidArgumentError(f"Non-finite {what}: {value!r}")


def format_number(value: float) -> str:
    """Formats a number for a content stream with fixed precision.

    Uses str.format, which is locale independent. Negative zero is
    written as positive zero.

    Args:
        value: Finite number.

    Returns:
        The number with exactly NUMBER_PRECISION decimals.
    """
    text = f"{value:.{NUMBER_PRECISION}f}"
    if text.startswith("-") and float(text) == 0.0:
        text = text[1:]
    return text


def make_form_stream(
    pdf: Pdf,
    width: float,
    height: float,
    content: bytes,
    resources: Dictionary | None = None,
) -> Stream:
    """Creates a Form XObject stream with the given content.

    Args:
        pdf: pikepdf Pdf object.
        width: BBox width.
        height: BBox height.
        content: Content stream bytes.
        resources: Optional resources dictionary. An empty one is used
            when omitted.

    Returns:
        pikepdf Stream configured as a Form XObject.
    """
    stream = pdf.make_stream(content)
    stream[Name.Type] = Name.XObject
    stream[Name.Subtype] = Name.Form
    stream[Name.BBox] = Array([0, 0, width, height])
    stream[Name.Resources] = resources if resources is not None else Dictionary()
    return stream

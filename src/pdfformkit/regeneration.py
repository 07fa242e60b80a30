# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.

"""Page content regeneration after annotation changes.

A DocumentStore holds one regenerator, chosen when the store is
constructed. Each page has a RegenerationPolicy; under
AUTOMATIC_ON_EVERY_CHANGE the store calls the regenerator after every
successful mutation that touches the page.
"""

import logging
from enum import Enum
from typing import Protocol

from pikepdf import Array, Dictionary, Name, Page, Pdf

from .utils import resolve_indirect as _resolve

logger = logging.getLogger(__name__)


class RegenerationPolicy(Enum):
    """When a page's content is rebuilt after a mutation."""

    MANUAL = "manual"
    AUTOMATIC_ON_EVERY_CHANGE = "automatic"


class ContentRegenerator(Protocol):
    """Rebuilds a page's rendered output from its object graph."""

    def regenerate(self, pdf: Pdf, page: Page) -> None: ...


class NullRegenerator:
    """Regenerator that leaves the page untouched."""

    def regenerate(self, pdf: Pdf, page: Page) -> None:
        logger.debug("Regeneration skipped (null regenerator)")


class CoalescingRegenerator:
    """Normalizes a page after annotation edits.

    Merges a multi-stream /Contents array into one stream and drops
    /Annots entries that no longer resolve to a dictionary.
    """

    def regenerate(self, pdf: Pdf, page: Page) -> None:
        page_dict = page.obj
        if Name.Contents in page_dict:
            page.contents_coalesce()

        annots = page_dict.get(Name.Annots)
        if annots is None:
            return
        annots = _resolve(annots)
        if not isinstance(annots, Array):
            del page_dict[Name.Annots]
            logger.debug("Removed malformed /Annots entry")
            return

        kept = Array(
            [a for a in annots if isinstance(_resolve(a), Dictionary)]
        )
        dropped = len(annots) - len(kept)
        if dropped:
            page_dict[Name.Annots] = kept
            logger.debug("Dropped %d dangling annotation reference(s)", dropped)

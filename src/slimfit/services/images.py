"""Image input handling for the report dialogue."""

import logging
from dataclasses import dataclass
from typing import Protocol

from slimfit.domain.conversation import ConversationState
from slimfit.domain.reports import ReportDraft

_logger = logging.getLogger(__name__)


class ImageInputHandler(Protocol):
    """Interface for turning an image into report data."""

    async def extract(
        self, file_id: str, state: ConversationState
    ) -> ReportDraft | None:
        """Return report fields read from the image, or ``None``."""


@dataclass
class PlaceholderImageHandler(ImageInputHandler):
    """Accept images without reading anything from them."""

    async def extract(
        self, file_id: str, state: ConversationState
    ) -> ReportDraft | None:
        """Log the image and return no data."""
        _logger.info(
            "Image received without extraction support",
            extra={"file_id": file_id, "state": state.value},
        )
        return None

"""Optional decoder diagnostics written to the log, never to the model."""

from __future__ import annotations

import json
import logging

from .decoder import Document
from .redaction import sanitize_for_logging


def report_document(
    document: Document,
    *,
    diagnostic_level: int,
    source: str,
    logger: logging.Logger,
) -> None:
    """Log overflow state (level >= 1) and the full document (level 2).

    Level 0 logs nothing.
    """
    if diagnostic_level >= 1:
        logger.info("[debug] %s doc.overflowed() : %s", source, int(document.overflowed))
    if diagnostic_level >= 2:
        logger.info(
            "[debug] %s document:\n%s",
            source,
            json.dumps(sanitize_for_logging(document.root), indent=2, ensure_ascii=False),
        )

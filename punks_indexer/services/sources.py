"""Decoded event sources"""
from pathlib import Path
from typing import Iterator, Union

import structlog
from pydantic import ValidationError

from punks_indexer.schemas.events import MarketEvent, parse_event_json

logger = structlog.get_logger()


def read_events(path: Union[str, Path]) -> Iterator[MarketEvent]:
    """
    Yield events from a JSON Lines file of already-decoded records.

    Blank lines are ignored; records that fail validation are logged and
    skipped.
    """
    path = Path(path)
    with path.open("r", encoding="utf-8") as fh:
        for line_number, line in enumerate(fh, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                yield parse_event_json(line)
            except ValidationError as e:
                logger.warning(
                    "Skipping malformed event",
                    file=str(path),
                    line=line_number,
                    errors=e.error_count(),
                    error=str(e).splitlines()[0],
                )

"""
Centralized error handling for the application.
"""

import json
from typing import Optional, Dict, Any

from pydantic import ValidationError

from timepredictor.config import config
from timepredictor.models.schemas import HistoricalRecord
from timepredictor.utils.logger import logging


def coerce_historical_record(raw: Dict[str, Any]) -> Optional[HistoricalRecord]:
    """
    Build a HistoricalRecord from raw stored data with graceful degradation.

    Args:
        raw: Mapping of record fields, e.g. a stored job row

    Returns:
        HistoricalRecord or None if the data cannot be parsed
    """
    try:
        return HistoricalRecord.model_validate(raw)
    except ValidationError as e:
        logging.warning(
            f"Skipping malformed history record {raw.get('id', '<unknown>')}: "
            f"{e.error_count()} validation error(s)"
        )
        logging.debug(str(e))
        return None


def log_diagnostic_info(context: Dict[str, Any]):
    """
    Log diagnostic information for debugging.

    Args:
        context: Dictionary of diagnostic information
    """
    if not config.DEBUG:
        return

    try:
        logging.info(f"Diagnostic info: {json.dumps(context, default=str)}")
    except (TypeError, ValueError) as e:
        logging.error(f"Error logging diagnostic info: {str(e)}")

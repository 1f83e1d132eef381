"""
Extraction of status table rows from Icinga object query responses.

The document must be an object holding a ``results`` array; anything else is
reported as a contract violation. Within the array, entries are read
leniently: an entry or ``attrs`` that is not an object, like a missing or
mistyped field, yields a row with the default values.
"""

import json
import math
from typing import Any, Dict, List

from icinga_dashboard.domain import (
    OUT_OF_RANGE_STATE,
    UNKNOWN_STATE,
    MonitoredRow,
    ObjectType,
)

MAX_STATE = OUT_OF_RANGE_STATE


class UpstreamContractError(Exception):
    """The Icinga API returned a document the dashboard cannot interpret."""


def _get_results(document: Any) -> List[Any]:
    if not isinstance(document, dict):
        raise UpstreamContractError(
            f"response is not a JSON object but {type(document).__name__}"
        )
    results = document.get("results")
    if not isinstance(results, list):
        raise UpstreamContractError(f"path $.results is not an array but {results!r}")
    return results


def _get_dict(mapping: Any, key: str) -> Dict[str, Any]:
    value = mapping.get(key) if isinstance(mapping, dict) else None
    return value if isinstance(value, dict) else {}


def _get_str(mapping: Dict[str, Any], key: str) -> str:
    value = mapping.get(key)
    return value if isinstance(value, str) else ""


def extract_state(attrs: Dict[str, Any]) -> int:
    """
    Return the state of an object.

    Missing or non-numeric states are reported as UNKNOWN_STATE. Numbers that
    are not an integer between 0 and MAX_STATE are clamped to OUT_OF_RANGE_STATE.
    Icinga encodes states as floating point numbers, so ``2.0`` is state 2.
    """
    state = attrs.get("state")
    if isinstance(state, bool) or not isinstance(state, (int, float)):
        return UNKNOWN_STATE
    if isinstance(state, float):
        if not math.isfinite(state) or not state.is_integer():
            return OUT_OF_RANGE_STATE
        state = int(state)
    if 0 <= state <= MAX_STATE:
        return state
    return OUT_OF_RANGE_STATE


def extract_row(objtype: ObjectType, result: Any) -> MonitoredRow:
    """Build the table row for a single entry of ``$.results``."""
    attrs = _get_dict(result, "attrs")

    if objtype == ObjectType.SERVICES:
        host = _get_str(attrs, "host_name")
        service = _get_str(attrs, "name")
    else:
        host = _get_str(attrs, "name")
        service = ""

    output = _get_str(_get_dict(attrs, "last_check_result"), "output")

    return MonitoredRow(host=host, service=service, output=output, state=extract_state(attrs))


def parse_results(objtype: ObjectType, body: bytes) -> List[MonitoredRow]:
    """
    Parse the body of a successful object query into table rows.

    Args:
        objtype: The object type that was queried.
        body: The raw response body.

    Returns:
        List[MonitoredRow]: One row per entry of ``$.results``, unsorted.

    Raises:
        UpstreamContractError: If the body is not JSON or does not have the
            expected shape. Malformed entries are not errors.
    """
    try:
        document = json.loads(body)
    except ValueError as err:
        raise UpstreamContractError(f"response is not valid JSON: {err}") from err

    return [extract_row(objtype, result) for result in _get_results(document)]

"""
Serialized form of a :class:`PriorityQueue`.

A queue is encoded as a mapping with a single ``"elements"`` array holding
the stored elements in heap (buffer) order. Decoding never trusts that order
and rebuilds the heap in O(n).
"""
from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Optional

from pqueue.priority_queue.priority_queue import PriorityQueue, Sort

ELEMENTS_KEY = "elements"

_LOGGER = logging.getLogger(__name__)


class DecodeError(ValueError):
    """Raised when a payload does not describe a priority queue."""


def encode(queue: PriorityQueue) -> dict[str, list[Any]]:
    storage = queue.storage
    return {ELEMENTS_KEY: storage.to_list() if storage is not None else []}


def decode(payload: Any, sort: Optional[Sort] = None) -> PriorityQueue:
    """
    Rebuild a queue from the output of :func:`encode`.

    Parameters
    ----------
    payload : Mapping
        Mapping holding the elements array under ``"elements"``.
    sort : callable, optional
        Ordering of the rebuilt queue; natural max order when omitted.

    Returns
    -------
    PriorityQueue
        A queue holding the decoded elements.

    Raises
    ------
    DecodeError
        If ``payload`` is not a mapping, or its elements entry is missing
        or is not a list.
    """
    if not isinstance(payload, Mapping):
        raise DecodeError(
            f"Expected a mapping, got {type(payload).__name__}"
        )
    if ELEMENTS_KEY not in payload:
        raise DecodeError(f"Missing '{ELEMENTS_KEY}' entry")
    elements = payload[ELEMENTS_KEY]
    if not isinstance(elements, list):
        raise DecodeError(
            f"'{ELEMENTS_KEY}' must be a list, got {type(elements).__name__}"
        )
    _LOGGER.debug("Decoding priority queue of %d elements", len(elements))
    return PriorityQueue(elements, sort)


def dumps(queue: PriorityQueue, **kwargs: Any) -> str:
    return json.dumps(encode(queue), **kwargs)


def loads(text: str, sort: Optional[Sort] = None) -> PriorityQueue:
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Invalid JSON payload: {exc}") from exc
    return decode(payload, sort)

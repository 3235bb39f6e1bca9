from itertools import islice
from typing import Any

from pqueue import PriorityQueue


def get_topk(queue: PriorityQueue, k: int) -> list[Any]:
    """
    Function to get the top-K elements from a priority queue.

    Elements come out in dequeue order, so for a max queue these are the K
    largest elements and for a min queue the K smallest. The queue itself is
    left untouched.

    Parameters
    ----------
    queue : PriorityQueue
        A PriorityQueue object
    k : int
        The number of 'top-K' elements to retrieve.

    Returns
    -------
    list[Any]
        The 'top-K' elements.
    """
    if k <= 0:
        return []
    if queue.is_empty:
        return []

    return list(islice(queue, k))

from pqueue.heap_storage.heap_storage import HeapStorage
from pqueue.priority_queue.priority_queue import PriorityQueue
from pqueue.priority_queue.codec import DecodeError, decode, dumps, encode, loads
from pqueue.priority_queue.topk import get_topk

from pqueue.heap_storage.heap_storage import HeapStorage

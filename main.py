from pqueue import PriorityQueue, dumps, get_topk, loads
from pqueue.config import configure_logging


configure_logging()

priorities = [10.5, 3.2, 15.0, 7.8, 20.1, 1.5]
elements = ["low", "very_low", "medium", "low_med", "high", "lowest"]

# Create a max queue of (priority, element) pairs
print("Creating priority queue...")
queue = PriorityQueue(zip(priorities, elements), sort=lambda a, b: a[0] > b[0])

# Test basic properties
print(f"Queue size: {len(queue)}")
print(f"Is empty: {queue.is_empty}")
print(f"Capacity: {queue.capacity}")
print(f"Next up: {queue.peek()}")
print(f"Top 3: {get_topk(queue, 3)}")

# Copies share storage until one of them changes
snapshot = queue.copy()
queue.enqueue((99.0, "urgent"))
print(f"Queue: {queue}")
print(f"Snapshot: {snapshot}")

numbers = PriorityQueue.min_pq([3, 1, 4, 1, 5, 9, 2, 6])
print(f"Round trip: {loads(dumps(numbers), sort=numbers.sort)}")

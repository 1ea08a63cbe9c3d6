import queue

from orion.exceptions import QueueInterrupted

__author__ = 'Daniele Pantaleone'
__version__ = '1.0'


class CancellableQueue(queue.Queue):
    """
    Bounded FIFO queue whose blocking push can be abandoned through a cancel token.
    """
    poll_interval = 0.5

    def push(self, item, cancel):
        """
        Put an item in the queue, waiting for a free slot if the queue is full.
        :param item: The item to queue
        :param cancel: A threading.Event: once set, a waiting push gives up
        :raise QueueInterrupted: If the cancel token is set before the item could be queued
        """
        while not cancel.is_set():
            try:
                self.put(item, timeout=self.poll_interval)
                return
            except queue.Full:
                continue
        raise QueueInterrupted(f"queue push abandoned: {item}")

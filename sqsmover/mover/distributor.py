import math
import traceback
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Optional, Tuple

from sqsmover.mover.batch import BatchMover
from sqsmover.mover.counter import SharedCounter, ErrorSlot


def effective_parallelism(total: int, parallel: int, max_per_read: int) -> int:
    """Never more workers than reads needed to cover the total, never fewer than one"""
    needed = math.ceil(total / max_per_read) if total > 0 else 0
    return max(1, min(parallel, needed))


class WorkDistributor:
    """Runs parallel move loops against one shared message budget"""

    def __init__(self, mover: BatchMover, max_per_read: int, log: Callable = print):
        self.mover = mover
        self.max_per_read = max_per_read
        self.log = log

    def distribute(self, total: int, parallel: int) -> Tuple[int, Optional[BaseException]]:
        """Move up to total messages with at most parallel workers.

        Returns the number of messages moved and the first error any worker hit.
        """
        workers = effective_parallelism(total, parallel, self.max_per_read)
        counter = SharedCounter(total)
        errors = ErrorSlot()
        self.log(f'Will move ~{total} messages using {workers} workers')
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix='sqsmover') as executor:
            futures = [executor.submit(self._move_loop, counter, errors) for _ in range(workers)]
            for future in futures:
                future.result()
        return counter.moved, errors.error

    def _move_loop(self, counter: SharedCounter, errors: ErrorSlot):
        while not errors.is_set():
            reserved = counter.reserve(self.max_per_read)
            if reserved == 0:
                break
            try:
                moved = self.mover.move_batch(reserved)
            except Exception as ex:
                counter.settle(reserved, getattr(ex, 'moved', 0))
                if errors.set(ex):
                    traceback.print_exception(ex)
                break
            counter.settle(reserved, moved)
            if moved == 0:
                self.log('No more messages to move in current worker')
                break
            self.log(f'Moved {counter.moved}/{counter.total} messages')

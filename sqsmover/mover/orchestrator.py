from typing import Callable, Dict, Optional

from sqsmover.errors import MigrationError
from sqsmover.facade.sqs import SQS
from sqsmover.mover.batch import BatchMover
from sqsmover.mover.distributor import WorkDistributor

STATE_IDLE = 'IDLE'
STATE_RESOLVING = 'RESOLVING'
STATE_ESTIMATING = 'ESTIMATING'
STATE_DISTRIBUTING = 'DISTRIBUTING'
STATE_DONE = 'DONE'
STATE_FAILED = 'FAILED'


class Migration:
    """Moves the messages of one queue into another.

    Nothing is retried. A failed migration can be run again to pick up what is left in the
    source queue, since messages only count as moved once they are deleted from it.
    """

    def __init__(self, sqs: SQS, config: Dict, log: Callable = print):
        self.sqs = sqs
        self.config = config
        self.log = log
        self.state = STATE_IDLE
        self.moved = 0

    def move(self, source_queue: str, destination_queue: str) -> int:
        self.state = STATE_RESOLVING
        try:
            source_url = self.sqs.resolve_queue_url(source_queue)
            destination_url = self.sqs.resolve_queue_url(destination_queue)
        except Exception:
            self.state = STATE_FAILED
            raise
        self.log(f'Moving messages from {source_url} to {destination_url}')
        return self.migrate(source_url, destination_url)

    def migrate(
            self, source_url: str, destination_url: str, limit: Optional[int] = None, parallel: Optional[int] = None
    ) -> int:
        limit = int(self.config['limit']) if limit is None else limit
        parallel = int(self.config['parallel']) if parallel is None else parallel

        self.state = STATE_ESTIMATING
        try:
            pending = self.sqs.approximate_depth(source_url)
        except Exception:
            self.state = STATE_FAILED
            raise
        self.log(f'ApproximateNumberOfMessages: {pending}')
        if pending == 0:
            self.log('Looks like nothing to move')
            self.state = STATE_DONE
            return 0
        if 0 < limit < pending:
            pending = limit

        self.state = STATE_DISTRIBUTING
        mover = BatchMover(
            sqs=self.sqs, source_url=source_url, destination_url=destination_url, config=self.config, log=self.log
        )
        distributor = WorkDistributor(
            mover=mover, max_per_read=int(self.config['max_messages_per_read']), log=self.log
        )
        self.moved, error = distributor.distribute(pending, parallel)
        if error is not None:
            self.state = STATE_FAILED
            raise MigrationError(
                f'moved {self.moved} of ~{pending} messages before failing: {error}', moved=self.moved
            ) from error
        self.state = STATE_DONE
        self.log(f'Moved {self.moved} messages')
        return self.moved

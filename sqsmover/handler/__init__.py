from typing import Callable, Dict

from sqsmover.facade.sqs import SQS
from sqsmover.mover.orchestrator import Migration


class RedriveHandler:
    """AWS Lambda handler that moves the messages of a queue, usually a dead letter queue, back to its source"""

    def __init__(self, config: Dict, sqs_client, log: Callable = print):
        self.config = config
        self.sqs = SQS(sqs_client=sqs_client)
        self.log = log

    def handle_request(self, event: Dict) -> Dict:
        self.log(event)
        migration = Migration(sqs=self.sqs, config=self.config, log=self.log)
        source_url = self.sqs.resolve_queue_url(event.get('source_queue', self.config['source_queue']))
        destination_url = self.sqs.resolve_queue_url(
            event.get('destination_queue', self.config['destination_queue'])
        )
        limit = event.get('limit')
        parallel = event.get('parallel')
        moved = migration.migrate(
            source_url, destination_url,
            limit=int(limit) if limit is not None else None,
            parallel=int(parallel) if parallel is not None else None
        )
        return {
            'source_queue_url': source_url,
            'destination_queue_url': destination_url,
            'moved': moved,
        }

from typing import Callable, Dict, List

from sqsmover.errors import MoverError, PartialDeleteError
from sqsmover.facade.sqs import SQS
from sqsmover.mover.packer import pack_batch, new_delete_entry


class BatchMover:
    """Moves one receive worth of messages from the source queue to the destination queue"""

    def __init__(self, sqs: SQS, source_url: str, destination_url: str, config: Dict, log: Callable = print):
        self.sqs = sqs
        self.source_url = source_url
        self.destination_url = destination_url
        self.log = log
        self.max_per_read = int(config['max_messages_per_read'])
        self.visibility_timeout = int(config['visibility_timeout'])
        self.wait_time_seconds = int(config['wait_time_seconds'])
        self.max_batch_bytes = int(config['max_batch_bytes'])
        self.group_id = config.get('message_group_id')

    def move_batch(self, max_to_read: int) -> int:
        """Receive up to max_to_read messages, send them on and delete the sent ones from the source.

        Returns the number of messages both sent and deleted, 0 when the receive found nothing.
        Raises a MoverError with the count moved before the failure.
        """
        messages = self.sqs.receive_messages(
            queue_url=self.source_url,
            max_count=min(max_to_read, self.max_per_read),
            visibility_timeout=self.visibility_timeout,
            wait_seconds=self.wait_time_seconds
        )
        self.log(f'Received {len(messages)} messages')
        if len(messages) == 0:
            return 0
        return self._send_messages(messages)

    def _send_messages(self, messages: List[Dict]) -> int:
        moved = 0
        while len(messages) > 0:
            entries, remainder = pack_batch(
                messages, max_batch_bytes=self.max_batch_bytes, group_id=self.group_id
            )
            try:
                successful, failed = self.sqs.send_message_batch(self.destination_url, entries)
            except MoverError as ex:
                ex.moved = moved
                raise
            sent = self._sent_messages(messages[:len(entries)], successful)
            if len(sent) == 0:
                self.log(f'None of {len(entries)} messages were sent')
                break
            if len(failed) > 0:
                self.log(f'{len(failed)}/{len(entries)} messages failed to send')
                for failure in failed:
                    self.log(f'Failed {failure.get("Id")} : {failure.get("Code")} : {failure.get("Message")}')

            try:
                deleted, not_deleted = self.sqs.delete_message_batch(
                    self.source_url, [new_delete_entry(message) for message in sent]
                )
            except MoverError as ex:
                ex.moved = moved
                raise
            if len(not_deleted) > 0:
                self.log(f'{len(not_deleted)}/{len(sent)} messages not deleted {not_deleted}')
                raise PartialDeleteError(
                    f'{len(not_deleted)} of {len(sent)} sent messages are still in the source queue',
                    moved=moved + len(deleted)
                )

            moved += len(sent)
            messages = remainder
        return moved

    @staticmethod
    def _sent_messages(messages: List[Dict], successful: List[Dict]) -> List[Dict]:
        sent_ids = {entry['Id'] for entry in successful}
        return [message for message in messages if message['MessageId'] in sent_ids]

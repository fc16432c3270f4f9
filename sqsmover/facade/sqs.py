from typing import Dict, List, Tuple

from botocore.exceptions import BotoCoreError, ClientError

from sqsmover.errors import QueueResolutionError, QueueAttributesError, ReceiveError, SendError, DeleteError

GROUP_ID = 'MessageGroupId'
DEDUPLICATION_ID = 'MessageDeduplicationId'


class SQS:
    """The five SQS operations the mover needs, over a boto3 SQS client"""

    def __init__(self, sqs_client):
        self.sqs = sqs_client

    def resolve_queue_url(self, queue_name: str) -> str:
        try:
            response = self.sqs.get_queue_url(QueueName=queue_name)
        except (ClientError, BotoCoreError) as ex:
            raise QueueResolutionError(f'queue {queue_name}: {ex}') from ex
        return response['QueueUrl']

    def get_queue_attributes(self, queue_url: str, attribute_names=None) -> Dict[str, str]:
        if attribute_names is None:
            attribute_names = ['All']
        try:
            response = self.sqs.get_queue_attributes(QueueUrl=queue_url, AttributeNames=attribute_names)
        except (ClientError, BotoCoreError) as ex:
            raise QueueAttributesError(f'queue {queue_url}: {ex}') from ex
        return response.get('Attributes', {})

    def approximate_depth(self, queue_url: str) -> int:
        attributes = self.get_queue_attributes(queue_url)
        try:
            return int(attributes.get('ApproximateNumberOfMessages', 0))
        except ValueError as ex:
            raise QueueAttributesError(f'queue {queue_url}: {ex}') from ex

    def receive_messages(
            self, queue_url: str, max_count: int, visibility_timeout: int, wait_seconds: int,
            attribute_names=(GROUP_ID, DEDUPLICATION_ID)
    ) -> List[Dict]:
        try:
            response = self.sqs.receive_message(
                QueueUrl=queue_url,
                MaxNumberOfMessages=max_count,
                VisibilityTimeout=visibility_timeout,
                WaitTimeSeconds=wait_seconds,
                MessageAttributeNames=['All'],
                AttributeNames=list(attribute_names)
            )
        except (ClientError, BotoCoreError) as ex:
            raise ReceiveError(str(ex)) from ex
        return response.get('Messages', [])

    def send_message_batch(self, queue_url: str, entries: List[Dict]) -> Tuple[List[Dict], List[Dict]]:
        try:
            response = self.sqs.send_message_batch(QueueUrl=queue_url, Entries=entries)
        except (ClientError, BotoCoreError) as ex:
            raise SendError(str(ex)) from ex
        return response.get('Successful', []), response.get('Failed', [])

    def delete_message_batch(self, queue_url: str, entries: List[Dict]) -> Tuple[List[Dict], List[Dict]]:
        try:
            response = self.sqs.delete_message_batch(QueueUrl=queue_url, Entries=entries)
        except (ClientError, BotoCoreError) as ex:
            raise DeleteError(str(ex)) from ex
        return response.get('Successful', []), response.get('Failed', [])

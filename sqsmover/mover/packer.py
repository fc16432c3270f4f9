from typing import Dict, List, Optional, Tuple

from sqsmover.facade.sqs import GROUP_ID, DEDUPLICATION_ID

# SQS caps a batch request at 10 entries and 256KB, assume attributes take less than 10KB
MAX_BATCH_SIZE = 10
MAX_BATCH_BYTES = (256 - 10) * 1024


def body_size(message: Dict) -> int:
    return len(message['Body'].encode('utf-8'))


def pack_batch(
        messages: List[Dict], max_batch_bytes: int = MAX_BATCH_BYTES, max_batch_size: int = MAX_BATCH_SIZE,
        group_id: Optional[str] = None
) -> Tuple[List[Dict], List[Dict]]:
    """Pack received messages into send entries without exceeding the batch limits.

    The first message always goes into the batch, even when it alone is over the byte budget,
    so an oversized message is left for SQS to reject instead of stalling the move.
    Returns the entries and the messages that did not fit.
    """
    remaining = max_batch_bytes
    entries = []
    for message in messages:
        if len(entries) >= max_batch_size:
            break
        remaining -= body_size(message)
        if remaining < 0 and len(entries) > 0:
            break
        entries.append(new_send_entry(message, group_id))
    return entries, messages[len(entries):]


def new_send_entry(message: Dict, group_id: Optional[str] = None) -> Dict:
    entry = {
        'Id': message['MessageId'],
        'MessageBody': message['Body'],
    }
    if message.get('MessageAttributes'):
        entry['MessageAttributes'] = message['MessageAttributes']
    attributes = message.get('Attributes', {})
    if GROUP_ID in attributes:
        entry[GROUP_ID] = attributes[GROUP_ID]
    if DEDUPLICATION_ID in attributes:
        entry[DEDUPLICATION_ID] = attributes[DEDUPLICATION_ID]
    if group_id is not None:
        entry[GROUP_ID] = group_id
    return entry


def new_delete_entry(message: Dict) -> Dict:
    return {
        'Id': message['MessageId'],
        'ReceiptHandle': message['ReceiptHandle'],
    }

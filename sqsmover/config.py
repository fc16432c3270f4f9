from typing import Dict, Mapping, Optional

import boto3
import botocore.config
import yaml

from sqsmover.mover.packer import MAX_BATCH_BYTES, MAX_BATCH_SIZE

DEFAULT_CONFIG = {
    'source_queue': None,
    'destination_queue': None,
    'region': 'us-west-2',
    'profile': None,
    'limit': 0,
    'parallel': 10,
    # must cover a full send and delete round trip, or messages reappear in the source
    'visibility_timeout': 60,
    'wait_time_seconds': 10,
    'max_messages_per_read': MAX_BATCH_SIZE,
    'max_batch_bytes': MAX_BATCH_BYTES,
    'message_group_id': None,
}

INT_KEYS = ('limit', 'parallel', 'visibility_timeout', 'wait_time_seconds', 'max_messages_per_read', 'max_batch_bytes')


def build_config(base: Optional[Mapping] = None, **overrides) -> Dict:
    config = dict(DEFAULT_CONFIG)
    if base is not None:
        config.update({key: value for key, value in base.items() if value is not None})
    config.update({key: value for key, value in overrides.items() if value is not None})
    unknown = set(config.keys()) - set(DEFAULT_CONFIG.keys())
    if len(unknown) > 0:
        raise ValueError(f'Unknown configuration {sorted(unknown)}')
    for key in INT_KEYS:
        config[key] = int(config[key])
    validate_config(config)
    return config


def validate_config(config: Dict):
    if not config['source_queue']:
        raise ValueError('Source queue name missing')
    if not config['destination_queue']:
        raise ValueError('Destination queue name missing')
    if config['limit'] < 0:
        raise ValueError(f'Limit {config["limit"]} cannot be negative')
    if config['parallel'] < 1:
        raise ValueError(f'Parallel {config["parallel"]} must be at least 1')
    if not 1 <= config['max_messages_per_read'] <= MAX_BATCH_SIZE:
        raise ValueError(f'Messages per read must be between 1 and {MAX_BATCH_SIZE}')
    if config['visibility_timeout'] < 0:
        raise ValueError(f'Visibility timeout {config["visibility_timeout"]} cannot be negative')
    if not 0 <= config['wait_time_seconds'] <= 20:
        raise ValueError(f'Wait time {config["wait_time_seconds"]} must be between 0 and 20 seconds')


def load_config_file(path: str) -> Dict:
    with open(path, 'r', encoding='utf-8') as f:
        settings = yaml.safe_load(f)
    if settings is None:
        return {}
    if not isinstance(settings, dict):
        raise ValueError(f'{path} does not hold a mapping of settings')
    return settings


def config_from_environ(environ: Mapping[str, str]) -> Dict:
    return build_config(
        source_queue=environ.get('sourceQueueName'),
        destination_queue=environ.get('destinationQueueName'),
        region=environ.get('awsRegion'),
        limit=environ.get('moveLimit'),
        parallel=environ.get('moveParallel'),
        visibility_timeout=environ.get('visibilityTimeout'),
        message_group_id=environ.get('messageGroupId'),
    )


def new_sqs_client(config: Dict, session=None):
    if session is None:
        session = boto3.session.Session(region_name=config['region'], profile_name=config['profile'])
    # the read timeout has to outlast the long poll
    sqs_config = botocore.config.Config(
        connect_timeout=10, read_timeout=config['wait_time_seconds'] + 20,
        max_pool_connections=max(10, config['parallel'])
    )
    return session.client('sqs', config=sqs_config)

import os

import boto3

from sqsmover.config import config_from_environ, new_sqs_client
from sqsmover.handler import RedriveHandler

config = config_from_environ(os.environ)
session = boto3.session.Session()
sqs_client = new_sqs_client(config, session=session)

handler = RedriveHandler(config=config, sqs_client=sqs_client)


def lambda_handler(event, context):
    result = handler.handle_request(event)
    print(result)
    return result

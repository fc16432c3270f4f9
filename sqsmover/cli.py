import sys
from argparse import ArgumentParser

from sqsmover.config import build_config, load_config_file, new_sqs_client
from sqsmover.errors import MoverError
from sqsmover.facade.sqs import SQS
from sqsmover.mover.orchestrator import Migration


def new_parser() -> ArgumentParser:
    parser = ArgumentParser(description='Move messages from one SQS queue to another')
    parser.add_argument('-s', '--source', help='The source queue name to move messages from')
    parser.add_argument('-d', '--destination', help='The destination queue name to move messages to')
    parser.add_argument('-r', '--region', help='The AWS region of both queues, "us-west-2" by default')
    parser.add_argument('-p', '--profile', help='The AWS profile to use')
    parser.add_argument('-l', '--limit', type=int, help='Limits the total number of messages moved, 0 for no limit')
    parser.add_argument('-n', '--parallel', type=int, help='Maximum number of parallel move workers, 10 by default')
    parser.add_argument('-g', '--group-id', help='Message group id to set on every moved message')
    parser.add_argument('-c', '--config', help='YAML file of settings, overridden by the other options')
    return parser


def main(argv=None, session=None, log=print) -> int:
    args = new_parser().parse_args(argv)
    try:
        base = load_config_file(args.config) if args.config else None
        config = build_config(
            base,
            source_queue=args.source,
            destination_queue=args.destination,
            region=args.region,
            profile=args.profile,
            limit=args.limit,
            parallel=args.parallel,
            message_group_id=args.group_id,
        )
    except (OSError, ValueError) as ex:
        log(f'Bad configuration: {ex}', file=sys.stderr)
        return 2

    sqs = SQS(sqs_client=new_sqs_client(config, session=session))
    migration = Migration(sqs=sqs, config=config, log=log)
    try:
        migration.move(config['source_queue'], config['destination_queue'])
    except MoverError as ex:
        log(f'Error moving all messages: {ex}', file=sys.stderr)
        log(f'{ex.moved} messages were moved, run again to move the rest', file=sys.stderr)
        return 1
    log('Completed!')
    return 0


if __name__ == '__main__':
    sys.exit(main())

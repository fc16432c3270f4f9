import pytest

from sqsmover.config import build_config, load_config_file, config_from_environ, new_sqs_client, DEFAULT_CONFIG
from tests.monkey.session import MonkeyPatchSession


class TestCase:

    def test_build_config_defaults(self):
        config = build_config(source_queue='src', destination_queue='dst')
        assert config['region'] == 'us-west-2'
        assert config['limit'] == 0
        assert config['parallel'] == 10
        assert config['visibility_timeout'] == 60
        assert config['wait_time_seconds'] == 10
        assert config['max_messages_per_read'] == 10
        assert config['max_batch_bytes'] == (256 - 10) * 1024

    def test_build_config_overrides_base(self):
        base = {'source_queue': 'src', 'destination_queue': 'dst', 'parallel': 4, 'limit': '100'}
        config = build_config(base, parallel=2)
        assert config['parallel'] == 2
        assert config['limit'] == 100

    def test_build_config_ignores_unset_overrides(self):
        config = build_config({'source_queue': 'src', 'destination_queue': 'dst', 'region': 'eu-west-1'}, region=None)
        assert config['region'] == 'eu-west-1'

    @pytest.mark.parametrize('overrides, reason', [
        ({'destination_queue': 'dst'}, 'Source queue name missing'),
        ({'source_queue': 'src'}, 'Destination queue name missing'),
        ({'source_queue': 'src', 'destination_queue': 'dst', 'parallel': 0}, 'must be at least 1'),
        ({'source_queue': 'src', 'destination_queue': 'dst', 'limit': -1}, 'cannot be negative'),
        ({'source_queue': 'src', 'destination_queue': 'dst', 'max_messages_per_read': 11}, 'between 1 and 10'),
        ({'source_queue': 'src', 'destination_queue': 'dst', 'wait_time_seconds': 21}, 'between 0 and 20'),
        ({'source_queue': 'src', 'destination_queue': 'dst', 'colour': 'red'}, 'Unknown configuration'),
    ])
    def test_build_config_invalid(self, overrides, reason):
        with pytest.raises(ValueError) as ex:
            build_config(**overrides)
        assert reason in str(ex.value)

    def test_load_config_file(self, tmp_path):
        path = tmp_path / 'mover.yaml'
        path.write_text('source_queue: src\ndestination_queue: dst\nparallel: 3\n', encoding='utf-8')
        config = build_config(load_config_file(str(path)))
        assert config['source_queue'] == 'src'
        assert config['parallel'] == 3

    def test_load_config_file_empty(self, tmp_path):
        path = tmp_path / 'mover.yaml'
        path.write_text('', encoding='utf-8')
        assert load_config_file(str(path)) == {}

    def test_load_config_file_not_a_mapping(self, tmp_path):
        path = tmp_path / 'mover.yaml'
        path.write_text('- one\n- two\n', encoding='utf-8')
        with pytest.raises(ValueError):
            load_config_file(str(path))

    def test_config_from_environ(self):
        config = config_from_environ({
            'sourceQueueName': 'tst-dlqueue',
            'destinationQueueName': 'tst-queue',
            'moveLimit': '500',
            'moveParallel': '5',
        })
        assert config['source_queue'] == 'tst-dlqueue'
        assert config['destination_queue'] == 'tst-queue'
        assert config['limit'] == 500
        assert config['parallel'] == 5
        assert config['region'] == DEFAULT_CONFIG['region']

    def test_new_sqs_client_timeouts(self):
        client = object()
        session = MonkeyPatchSession({'sqs': client})
        config = build_config(source_queue='src', destination_queue='dst', parallel=25)
        assert new_sqs_client(config, session=session) is client
        sqs_config = session.client_configs[0]
        assert sqs_config.read_timeout > config['wait_time_seconds']
        assert sqs_config.max_pool_connections == 25

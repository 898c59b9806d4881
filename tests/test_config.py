"""
Unit tests for reposeed.config module
"""
import unittest
import tempfile
import os
import shutil
import json
import logging
from pathlib import Path
from unittest.mock import patch

from reposeed.config import (
    DEBUG_FORMAT,
    apply_env_overrides,
    apply_logging_config,
    get_config_path,
    get_default_config,
    load_config,
    merge_configs,
)


class TestConfigManagement(unittest.TestCase):
    """Test configuration loading"""

    def setUp(self):
        """Set up an isolated HOME"""
        self.temp_dir = tempfile.mkdtemp()
        self.env = patch.dict(os.environ, {'HOME': self.temp_dir})
        self.env.start()
        os.environ.pop('REPOSEED_CONFIG', None)
        for key in [k for k in os.environ if k.startswith('REPOSEED_')]:
            del os.environ[key]
        self.config_dir = Path(self.temp_dir) / '.reposeed'

    def tearDown(self):
        self.env.stop()
        shutil.rmtree(self.temp_dir)

    def write(self, name, text):
        self.config_dir.mkdir(exist_ok=True)
        path = self.config_dir / name
        path.write_text(text)
        return path

    def test_get_default_config(self):
        """Test default configuration structure"""
        config = get_default_config()

        self.assertEqual(config['general']['staging_root'], "")
        self.assertTrue(config['general']['progress'])
        self.assertEqual(config['logging']['level'], 'WARNING')
        self.assertIn('format', config['logging'])

    def test_load_config_no_file(self):
        """Defaults are returned when no file exists"""
        self.assertEqual(load_config(), get_default_config())

    def test_default_path(self):
        """Default path is ~/.reposeed/config.json"""
        self.assertEqual(get_config_path(), self.config_dir / 'config.json')

    def test_load_config_json_file(self):
        """JSON config merges over defaults"""
        self.write('config.json', json.dumps({'general': {'staging_root': '/var/tmp/seed'}}))

        config = load_config()

        self.assertEqual(config['general']['staging_root'], '/var/tmp/seed')
        # Untouched keys keep their defaults
        self.assertTrue(config['general']['progress'])

    def test_load_config_toml_file(self):
        """TOML config is loaded"""
        self.write('config.toml', '[general]\nprogress = false\n')

        config = load_config()

        self.assertFalse(config['general']['progress'])

    def test_load_config_yaml_file(self):
        """YAML config is loaded"""
        self.write('config.yaml', 'logging:\n  level: INFO\n')

        config = load_config()

        self.assertEqual(config['logging']['level'], 'INFO')
        self.assertEqual(config['logging']['format'], get_default_config()['logging']['format'])

    def test_empty_file_skipped(self):
        """Empty config files are skipped"""
        self.write('config.json', '')
        self.write('config.yaml', 'general:\n  progress: false\n')

        self.assertEqual(get_config_path(), self.config_dir / 'config.yaml')

    def test_env_config_path(self):
        """REPOSEED_CONFIG points at the config file"""
        path = Path(self.temp_dir) / 'elsewhere.json'
        path.write_text(json.dumps({'general': {'progress': False}}))
        os.environ['REPOSEED_CONFIG'] = str(path)

        self.assertEqual(get_config_path(), path)
        self.assertFalse(load_config()['general']['progress'])

    def test_invalid_file_falls_back_to_defaults(self):
        """Unreadable config logs and falls back"""
        self.write('config.json', '{not json')

        with self.assertLogs('reposeed', level='ERROR'):
            config = load_config()

        self.assertEqual(config, get_default_config())

    def test_env_overrides_file(self):
        """Environment variables override the file"""
        self.write('config.json', json.dumps({'general': {'progress': True}}))
        os.environ['REPOSEED_GENERAL_PROGRESS'] = 'off'
        os.environ['REPOSEED_GENERAL_STAGING_ROOT'] = '/srv/staging'

        config = load_config()

        self.assertFalse(config['general']['progress'])
        self.assertEqual(config['general']['staging_root'], '/srv/staging')


class TestMergeAndOverrides(unittest.TestCase):
    """Test merge_configs and apply_env_overrides"""

    def test_merge_is_recursive(self):
        """Nested sections merge key by key"""
        base = {'general': {'a': 1, 'b': 2}, 'logging': {'level': 'WARNING'}}

        merged = merge_configs(base, {'general': {'b': 3}})

        self.assertEqual(merged, {'general': {'a': 1, 'b': 3}, 'logging': {'level': 'WARNING'}})
        self.assertEqual(base['general']['b'], 2)

    def test_override_types(self):
        """Override values are typed"""
        config = {'general': {'progress': True, 'staging_root': '', 'retries': 0}}
        env = {
            'REPOSEED_GENERAL_PROGRESS': 'no',
            'REPOSEED_GENERAL_STAGING_ROOT': '/tmp/x',
            'REPOSEED_GENERAL_RETRIES': '3',
        }
        with patch.dict(os.environ, env):
            apply_env_overrides(config)

        self.assertEqual(config['general'], {'progress': False, 'staging_root': '/tmp/x', 'retries': 3})

    def test_unknown_keys_ignored(self):
        """Unknown keys are not added"""
        config = get_default_config()
        with patch.dict(os.environ, {'REPOSEED_NOPE_KEY': 'x', 'REPOSEED_GENERAL_NOPE': 'y'}):
            apply_env_overrides(config)

        self.assertEqual(config, get_default_config())


class TestLoggingConfig(unittest.TestCase):
    """Test apply_logging_config"""

    def setUp(self):
        self.logger = logging.getLogger('reposeed')
        self.level = self.logger.level

    def tearDown(self):
        self.logger.setLevel(self.level)

    def test_level_from_config(self):
        """The level comes from configuration"""
        apply_logging_config({'logging': {'level': 'info'}})

        self.assertEqual(self.logger.level, logging.INFO)

    def test_debug_flag(self):
        """--debug forces DEBUG and the debug format"""
        apply_logging_config(get_default_config(), debug=True)

        self.assertEqual(self.logger.level, logging.DEBUG)
        for handler in logging.getLogger().handlers:
            self.assertEqual(handler.formatter._fmt, DEBUG_FORMAT)

    def test_unknown_level(self):
        """Unknown levels fall back to WARNING"""
        apply_logging_config({'logging': {'level': 'LOUD'}})

        self.assertEqual(self.logger.level, logging.WARNING)


if __name__ == '__main__':
    unittest.main()

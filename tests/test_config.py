"""
Unit tests for repobase.config module
"""
import unittest
import tempfile
import os
import shutil
import json
from pathlib import Path
from unittest.mock import patch

from repobase.config import (
    apply_env_overrides,
    get_config_path,
    get_default_config,
    load_config,
    merge_configs,
)
from repobase.exit_codes import ConfigError


class TestConfigManagement(unittest.TestCase):
    """Test configuration management functionality"""

    def setUp(self):
        """Set up an isolated HOME without repobase environment variables"""
        self.temp_dir = tempfile.mkdtemp()
        env = {k: v for k, v in os.environ.items()
               if not k.startswith('REPOBASE_') and k != 'GITLAB_TOKEN'}
        env['HOME'] = self.temp_dir
        self.env_patch = patch.dict(os.environ, env, clear=True)
        self.env_patch.start()
        self.config_dir = Path(self.temp_dir) / '.repobase'
        self.config_dir.mkdir()

    def tearDown(self):
        """Clean up test environment"""
        self.env_patch.stop()
        shutil.rmtree(self.temp_dir)

    def test_get_default_config(self):
        """Test default configuration structure"""
        config = get_default_config()

        self.assertEqual(config['gitlab']['host'], 'gitlab.com')
        self.assertEqual(config['resolution']['max_remotes_for_lookup'], 5)
        self.assertEqual(config['resolution']['remote_priority'], ['upstream', 'gitlab', 'origin'])
        self.assertEqual(config['resolution']['config_key'], 'repobase-resolved')
        self.assertIn('level', config['logging'])

    def test_load_config_no_file(self):
        """Test loading config when no file exists"""
        config = load_config()
        self.assertEqual(config, get_default_config())

    def test_load_config_json_file(self):
        """Test loading config from JSON file"""
        with open(self.config_dir / 'config.json', 'w') as f:
            json.dump({'gitlab': {'host': 'gitlab.example.com'}}, f)

        config = load_config()

        self.assertEqual(config['gitlab']['host'], 'gitlab.example.com')
        # Defaults survive the merge
        self.assertEqual(config['gitlab']['timeout_seconds'], 30)

    def test_load_config_yaml_file(self):
        """Test loading config from YAML file"""
        (self.config_dir / 'config.yaml').write_text(
            "resolution:\n  remote_priority:\n    - origin\n    - upstream\n"
        )

        config = load_config()

        self.assertEqual(config['resolution']['remote_priority'], ['origin', 'upstream'])

    def test_load_config_toml_file(self):
        """Test loading config from TOML file"""
        (self.config_dir / 'config.toml').write_text(
            '[gitlab]\nuse_glab_cli = false\n'
        )

        config = load_config()

        self.assertFalse(config['gitlab']['use_glab_cli'])

    def test_config_path_from_environment(self):
        """Test REPOBASE_CONFIG takes precedence"""
        custom = Path(self.temp_dir) / 'custom.json'
        custom.write_text(json.dumps({'logging': {'level': 'DEBUG'}}))
        os.environ['REPOBASE_CONFIG'] = str(custom)

        self.assertEqual(get_config_path(), custom)
        self.assertEqual(load_config()['logging']['level'], 'DEBUG')

    def test_invalid_config_raises(self):
        """Test a broken config file is reported"""
        (self.config_dir / 'config.json').write_text('{not json')

        with self.assertRaises(ConfigError):
            load_config()

    def test_non_mapping_config_raises(self):
        """Test a config file that is not a mapping is reported"""
        (self.config_dir / 'config.json').write_text('[1, 2]')

        with self.assertRaises(ConfigError):
            load_config()

    def test_gitlab_token_fallback(self):
        """Test GITLAB_TOKEN fills an empty token"""
        os.environ['GITLAB_TOKEN'] = 'from-env'
        self.assertEqual(load_config()['gitlab']['token'], 'from-env')


class TestEnvOverrides(unittest.TestCase):
    """Test environment variable overrides"""

    def test_string_override(self):
        with patch.dict(os.environ, {'REPOBASE_GITLAB_HOST': 'git.corp.net'}):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config['gitlab']['host'], 'git.corp.net')

    def test_numeric_token_stays_string(self):
        with patch.dict(os.environ, {'REPOBASE_GITLAB_TOKEN': '123456'}):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config['gitlab']['token'], '123456')
        self.assertIsInstance(config['gitlab']['token'], str)

    def test_boolean_word_for_string_key_stays_string(self):
        with patch.dict(os.environ, {'REPOBASE_GITLAB_HOST': 'on'}):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config['gitlab']['host'], 'on')

    def test_multi_word_key(self):
        with patch.dict(os.environ, {'REPOBASE_RESOLUTION_MAX_REMOTES_FOR_LOOKUP': '3'}):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config['resolution']['max_remotes_for_lookup'], 3)

    def test_boolean_override(self):
        with patch.dict(os.environ, {'REPOBASE_GITLAB_USE_GLAB_CLI': 'false'}):
            config = apply_env_overrides(get_default_config())
        self.assertFalse(config['gitlab']['use_glab_cli'])

    def test_list_override(self):
        with patch.dict(os.environ, {'REPOBASE_RESOLUTION_REMOTE_PRIORITY': 'origin, upstream'}):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config['resolution']['remote_priority'], ['origin', 'upstream'])

    def test_unknown_key_ignored(self):
        with patch.dict(os.environ, {'REPOBASE_NOPE_VALUE': 'x'}):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config, get_default_config())


class TestMergeConfigs(unittest.TestCase):
    """Test recursive config merging"""

    def test_nested_merge(self):
        merged = merge_configs(
            {'a': {'b': 1, 'c': 2}, 'd': 3},
            {'a': {'c': 20}, 'e': 5}
        )
        self.assertEqual(merged, {'a': {'b': 1, 'c': 20}, 'd': 3, 'e': 5})


if __name__ == '__main__':
    unittest.main()

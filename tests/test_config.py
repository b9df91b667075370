"""
Unit tests for regcheck.config module
"""
import unittest
import tempfile
import os
import shutil
import json
from pathlib import Path
from unittest.mock import patch

from regcheck.config import (
    load_config,
    get_config_path,
    get_default_config,
    merge_configs,
    apply_env_overrides,
)


class TestConfigManagement(unittest.TestCase):
    """Test configuration loading and merging"""

    def setUp(self):
        """Set up an empty registry root and a clean environment"""
        self.temp_dir = tempfile.mkdtemp()
        self.env = patch.dict(os.environ, {}, clear=False)
        self.env.start()
        for key in [k for k in os.environ if k.startswith('REGCHECK_')]:
            del os.environ[key]

    def tearDown(self):
        self.env.stop()
        shutil.rmtree(self.temp_dir)

    def test_get_default_config(self):
        """Test default configuration structure"""
        config = get_default_config()

        for section in ('registries', 'git', 'http', 'classifier', 'schema', 'scan', 'labels', 'logging'):
            self.assertIn(section, config)

        self.assertEqual(config['registries']['plugins']['file'], 'plugins.json')
        self.assertEqual(config['git']['base_ref'], 'origin/main')
        self.assertEqual(config['classifier']['match'], 'substring')
        self.assertIsNone(config['http']['timeout'])

    def test_load_config_no_file(self):
        """Test loading config when no file exists"""
        self.assertIsNone(get_config_path(self.temp_dir))
        self.assertEqual(load_config(self.temp_dir), get_default_config())

    def test_load_json_config(self):
        """Test a JSON config file in the root is merged over defaults"""
        Path(self.temp_dir, '.regcheck.json').write_text(json.dumps({
            'git': {'base_ref': 'upstream/main'},
        }))

        config = load_config(self.temp_dir)

        self.assertEqual(config['git']['base_ref'], 'upstream/main')
        self.assertEqual(config['git']['remote'], 'origin')

    def test_load_yaml_config(self):
        """Test a YAML config file"""
        Path(self.temp_dir, '.regcheck.yaml').write_text(
            "classifier:\n  match: basename\nlabels:\n  enabled: false\n"
        )

        config = load_config(self.temp_dir)

        self.assertEqual(config['classifier']['match'], 'basename')
        self.assertFalse(config['labels']['enabled'])

    def test_load_toml_config(self):
        """Test a TOML config file"""
        Path(self.temp_dir, '.regcheck.toml').write_text(
            '[registries.themes]\nfile = "data/themes.json"\n'
        )

        config = load_config(self.temp_dir)

        self.assertEqual(config['registries']['themes']['file'], 'data/themes.json')
        self.assertEqual(config['registries']['plugins']['file'], 'plugins.json')

    def test_regcheck_config_env(self):
        """Test REGCHECK_CONFIG takes precedence over the root file"""
        other = Path(self.temp_dir, 'custom.json')
        other.write_text(json.dumps({'schema': {'format': False}}))
        Path(self.temp_dir, '.regcheck.json').write_text(json.dumps({'schema': {'format': True}}))
        os.environ['REGCHECK_CONFIG'] = str(other)

        self.assertEqual(get_config_path(self.temp_dir), other)
        self.assertFalse(load_config(self.temp_dir)['schema']['format'])

    def test_invalid_config_file_falls_back_to_defaults(self):
        """Test an unparseable config file is reported and ignored"""
        Path(self.temp_dir, '.regcheck.json').write_text('{not json')

        with self.assertLogs('regcheck', level='ERROR'):
            config = load_config(self.temp_dir)

        self.assertEqual(config, get_default_config())

    def test_merge_configs(self):
        """Test recursive merge"""
        merged = merge_configs({'a': {'b': 1, 'c': 2}, 'd': 3}, {'a': {'b': 10}, 'e': 4})
        self.assertEqual(merged, {'a': {'b': 10, 'c': 2}, 'd': 3, 'e': 4})


class TestEnvOverrides(unittest.TestCase):
    """Test REGCHECK_* environment overrides"""

    def test_nested_key_with_underscore(self):
        with patch.dict(os.environ, {'REGCHECK_GIT_BASE_REF': 'origin/develop'}):
            config = apply_env_overrides(get_default_config())
        self.assertEqual(config['git']['base_ref'], 'origin/develop')

    def test_boolean_and_integer_values(self):
        with patch.dict(os.environ, {'REGCHECK_GIT_FETCH': 'false', 'REGCHECK_HTTP_TIMEOUT': '15'}):
            config = apply_env_overrides(get_default_config())
        self.assertIs(config['git']['fetch'], False)
        self.assertEqual(config['http']['timeout'], 15)

    def test_unknown_keys_are_ignored(self):
        with patch.dict(os.environ, {'REGCHECK_GITHUB_TOKEN': 'secret'}):
            config = apply_env_overrides(get_default_config())
        self.assertNotIn('github', config)
        self.assertNotIn('token', config)


if __name__ == '__main__':
    unittest.main()

import tempfile
import unittest
from pathlib import Path

from config import DEFAULT_DATA_FILE, DEFAULT_MODEL, load_settings, truthy


class TestLoadSettings(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.env_file = Path(self._tmp.name) / '.env'

    def test_defaults(self) -> None:
        settings = load_settings(environ={}, env_file=self.env_file)
        self.assertEqual(settings.data_file, DEFAULT_DATA_FILE)
        self.assertEqual(settings.storage, 'file')
        self.assertEqual(settings.pixels_per_day, 50)
        self.assertFalse(settings.fit)
        self.assertIsNone(settings.api_key)
        self.assertEqual(settings.model, DEFAULT_MODEL)
        self.assertEqual(settings.log_level, 'WARNING')

    def test_env_file_values_and_priority(self) -> None:
        self.env_file.write_text(
            "# comment\n"
            "OPENAI_API_KEY='from-file'\n"
            "GANTT_MODEL=file-model\n"
            "GANTT_FIT=yes\n"
            "not a pair\n"
            "UNRELATED=1\n"
        )
        settings = load_settings(environ={'GANTT_MODEL': 'env-model'}, env_file=self.env_file)
        self.assertEqual(settings.api_key, 'from-file')
        self.assertEqual(settings.model, 'env-model')
        self.assertTrue(settings.fit)

    def test_numbers_are_parsed_and_floored(self) -> None:
        settings = load_settings(environ={'GANTT_PIXELS_PER_DAY': '5', 'GANTT_API_TIMEOUT': '2.5'},
                                 env_file=self.env_file)
        self.assertEqual(settings.pixels_per_day, 20)
        self.assertEqual(settings.api_timeout, 2.5)

    def test_bad_values_fall_back(self) -> None:
        with self.assertLogs('config', level='WARNING'):
            settings = load_settings(environ={'GANTT_PIXELS_PER_DAY': 'wide', 'GANTT_STORAGE': 'cloud'},
                                     env_file=self.env_file)
        self.assertEqual(settings.pixels_per_day, 50)
        self.assertEqual(settings.storage, 'file')

    def test_truthy(self) -> None:
        self.assertTrue(truthy(None))
        self.assertFalse(truthy(None, False))
        self.assertFalse(truthy('off'))
        self.assertTrue(truthy('1'))


if __name__ == '__main__':
    unittest.main()

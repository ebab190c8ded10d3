"""
# Paste-Transform: test_cli.py

Licensed under "MIT No Attribution" (MIT-0), see LICENSE.

Perform unit testing for `cli.py`.
"""

import contextlib
import io
import json
import os
import tempfile
import unittest

from pastetransform.cli import load_settings_file, main, parse_command_line_arguments, remove_trailing_newline
from pastetransform.constants import (
    COMMAND_LINE_ERROR_EXIT_CODE,
    CURRENT_FORMAT_VERSION,
    DEFAULT_SETTINGS_FILE_NAME,
    GENERIC_ERROR_EXIT_CODE,
)


class TestCli(unittest.TestCase):
    def setUp(self):
        self._temporary_directory = tempfile.TemporaryDirectory()
        self.settings_file_name = os.path.join(self._temporary_directory.name, 'settings.json')

    def tearDown(self):
        self._temporary_directory.cleanup()

    def write_settings(self, blob):
        with open(self.settings_file_name, 'w', encoding='utf-8') as settings_file:
            json.dump(blob, settings_file)

    def run_main(self, arguments: list[str]) -> str:
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout), contextlib.redirect_stderr(io.StringIO()):
            main(arguments)

        return stdout.getvalue()

    def test_parse_command_line_arguments(self):
        parsed_arguments = parse_command_line_arguments(['-s', 'rules.json', '-m', '-x', 'one', 'two'])

        self.assertEqual(parsed_arguments.settings_file_name, 'rules.json')
        self.assertTrue(parsed_arguments.migrate_mode_enabled)
        self.assertFalse(parsed_arguments.check_mode_enabled)
        self.assertTrue(parsed_arguments.verbose_mode_enabled)
        self.assertEqual(parsed_arguments.texts, ['one', 'two'])

        parsed_arguments = parse_command_line_arguments([])
        self.assertEqual(parsed_arguments.settings_file_name, DEFAULT_SETTINGS_FILE_NAME)
        self.assertEqual(parsed_arguments.texts, [])

    def test_remove_trailing_newline(self):
        self.assertEqual(remove_trailing_newline('abc\n'), 'abc')
        self.assertEqual(remove_trailing_newline('abc\n\n'), 'abc\n')
        self.assertEqual(remove_trailing_newline('abc'), 'abc')
        self.assertEqual(remove_trailing_newline(''), '')

    def test_load_settings_file(self):
        self.assertIsNone(load_settings_file(self.settings_file_name))

        self.write_settings({'patterns': ['a'], 'replacers': ['X']})
        self.assertEqual(load_settings_file(self.settings_file_name), {'patterns': ['a'], 'replacers': ['X']})

    def test_load_settings_file_invalid_json(self):
        with open(self.settings_file_name, 'w', encoding='utf-8') as settings_file:
            settings_file.write('{not json')

        with contextlib.redirect_stderr(io.StringIO()), self.assertRaises(SystemExit) as context:
            load_settings_file(self.settings_file_name)
        self.assertEqual(context.exception.code, GENERIC_ERROR_EXIT_CODE)

    def test_main_transforms_texts(self):
        self.write_settings({'patterns': ['b', 'c'], 'replacers': ['X', 'Y']})

        self.assertEqual(self.run_main(['-s', self.settings_file_name, 'abcb', 'ccc', 'zzz']), 'aXcX\nYYY\nzzz\n')

    def test_main_migrates(self):
        self.write_settings({'patterns': ['b'], 'replacers': ['X'], 'enabled': [False], 'comments': ['off']})

        self.assertEqual(self.run_main(['-s', self.settings_file_name, '-m']), '')

        blob = load_settings_file(self.settings_file_name)
        self.assertEqual(blob['formatVersion'], CURRENT_FORMAT_VERSION)
        self.assertEqual(len(blob['links']), 1)
        self.assertFalse(blob['links'][0]['enabled'])
        self.assertEqual(blob['links'][0]['comment'], 'off')

    def test_main_check(self):
        self.write_settings({'patterns': ['b'], 'replacers': ['X']})
        output = self.run_main(['-s', self.settings_file_name, '-c'])
        self.assertTrue(output.startswith('OK: #'))
        self.assertIn('/b/ --> "X"', output)

        self.write_settings({'patterns': ['('], 'replacers': ['X']})
        with self.assertRaises(SystemExit) as context:
            self.run_main(['-s', self.settings_file_name, '-c'])
        self.assertEqual(context.exception.code, GENERIC_ERROR_EXIT_CODE)

    def test_main_check_with_text(self):
        with self.assertRaises(SystemExit) as context:
            self.run_main(['-s', self.settings_file_name, '-c', 'abc'])
        self.assertEqual(context.exception.code, COMMAND_LINE_ERROR_EXIT_CODE)


if __name__ == '__main__':
    unittest.main()

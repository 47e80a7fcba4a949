import argparse
import json
import os
import sys
import tempfile
import unittest
from unittest.mock import patch

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from jsvalidate.jsvalidate import load_commands, main


def get_jsons_path(name):
    """Provides the path of a file in the test fixtures."""
    return os.path.join(os.path.dirname(__file__), 'jsons', name)


class TestMain(unittest.TestCase):

    def test_commands_resolve(self):
        """Every command in commands.json names an importable function."""
        for command in load_commands():
            module_name, func_name = command['function']['name'].rsplit('.', 1)
            module = __import__(module_name, fromlist=[func_name])
            self.assertTrue(callable(getattr(module, func_name)), command['command'])

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(command=None))
    def test_main_no_command(self, mock_parse_args):
        """Test main function with no command."""
        with patch('argparse.ArgumentParser.print_help') as mock_help:
            main()
        mock_help.assert_called_once()

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(command=None, version=True))
    def test_main_version(self, mock_parse_args):
        with patch('builtins.print') as mock_print:
            main()
        self.assertTrue(mock_print.call_args.args[0].startswith('jsvalidate '))

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(
        command='validate', input=[get_jsons_path('persons.json')], schema=get_jsons_path('person.schema.json'),
        quiet=True))
    def test_main_validate_command(self, mock_parse_args):
        """Test main function with validate command."""
        main()

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(
        command='validate', input=[get_jsons_path('persons.jsonl')], schema=get_jsons_path('person.schema.json'),
        quiet=True))
    def test_main_validate_command_invalid(self, mock_parse_args):
        with self.assertRaises(SystemExit) as cm:
            main()
        self.assertEqual(cm.exception.code, 1)

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(
        command='check', input=get_jsons_path('tree.schema.json')))
    def test_main_check_command(self, mock_parse_args):
        """Test main function with check command."""
        with patch('builtins.print'):
            main()

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(
        command='normalize', input=get_jsons_path('person.schema.json'),
        out=tempfile.gettempdir() + '/person.normalized.json'))
    def test_main_normalize_command(self, mock_parse_args):
        """Test main function with normalize command."""
        with patch('builtins.print'):
            main()
        output_path = tempfile.gettempdir() + '/person.normalized.json'
        assert os.path.exists(output_path)
        with open(output_path, 'r', encoding='utf-8') as f:
            self.assertEqual(json.load(f)["title"], "Person")

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(
        command='normalize', input=get_jsons_path('person.schema.json'), out=None))
    def test_main_normalize_to_stdout(self, mock_parse_args):
        """Without --out the normalized schema is printed."""
        with patch('builtins.print') as mock_print:
            main()
        mock_print.assert_called_once()
        self.assertEqual(json.loads(mock_print.call_args.args[0])["title"], "Person")

    @patch('argparse.ArgumentParser.parse_args', return_value=argparse.Namespace(
        command='normalize', input=get_jsons_path('missing.schema.json'), out=None))
    def test_main_error_exits(self, mock_parse_args):
        with patch('builtins.print') as mock_print:
            with self.assertRaises(SystemExit) as cm:
                main()
        self.assertEqual(cm.exception.code, 1)
        self.assertEqual(mock_print.call_args.args[0], "Error: ")


if __name__ == '__main__':
    unittest.main()

import unittest
from unittest.mock import patch
import io
import json
import os
import sys

# Add the src directory to the Python path
src_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src'))
if src_root not in sys.path:
    sys.path.insert(0, src_root)

from mcpforge.main import main


SPEC = {
    "openapi": "3.0.0",
    "info": {"title": "Pets", "version": "1"},
    "servers": [{"url": "https://api.example.com"}],
    "paths": {
        "/pets": {
            "get": {"operationId": "listPets", "responses": {}},
            "post": {"operationId": "createPet", "x-mcp": "false", "responses": {}},
        },
        "/pets/{petId}": {"delete": {"operationId": "deletePet", "x-mcp": True, "responses": {}}},
    },
}


@patch('mcpforge.main.setup_environment')
class TestMainCLI(unittest.TestCase):

    @patch('mcpforge.main.extract_command')
    def test_extract_command_args(self, mock_extract_command, mock_setup):
        test_args = ['extract', '--spec', 'openapi.yaml', '--dereference', '--exclude-operation-id', 'a', '--exclude-operation-id', 'b']
        with patch('sys.argv', ['mcpforge'] + test_args):
            main()
        mock_extract_command.assert_called_once()
        called_args = mock_extract_command.call_args[0][0]
        self.assertEqual(called_args.spec, 'openapi.yaml')
        self.assertTrue(called_args.dereference)
        self.assertFalse(called_args.default_exclude)
        self.assertEqual(called_args.exclude_operation_id, ['a', 'b'])
        self.assertIsNone(called_args.output)
        mock_setup.assert_called_once_with(debug=False)

    @patch('mcpforge.main.list_command')
    def test_list_command_args(self, mock_list_command, mock_setup):
        test_args = ['list', '--spec', 'openapi.json', '--default-exclude', '--debug']
        with patch('sys.argv', ['mcpforge'] + test_args):
            main()
        called_args = mock_list_command.call_args[0][0]
        self.assertTrue(called_args.default_exclude)
        mock_setup.assert_called_once_with(debug=True)

    @patch('argparse.ArgumentParser.print_help')
    def test_main_no_command(self, mock_print_help, mock_setup):
        with patch('sys.argv', ['mcpforge']):
            main()
        mock_print_help.assert_called_once()
        mock_setup.assert_not_called()

    @patch('mcpforge.openapi.spec.load_spec_from_file', return_value=SPEC)
    def test_extract_writes_json_to_stdout(self, mock_load, mock_setup):
        stdout = io.StringIO()
        with patch('sys.argv', ['mcpforge', 'extract', '--spec', 'pets.json']), patch('sys.stdout', stdout):
            main()

        tools = json.loads(stdout.getvalue())
        self.assertEqual([t["name"] for t in tools], ["listPets", "deletePet"])
        self.assertEqual(tools[0]["baseUrl"], "https://api.example.com")
        self.assertEqual(tools[1]["pathTemplate"], "/pets/{petId}")

    @patch('mcpforge.openapi.spec.load_spec_from_file', return_value=SPEC)
    def test_extract_default_exclude_and_exclusions(self, mock_load, mock_setup):
        stdout = io.StringIO()
        test_args = ['extract', '--spec', 'pets.json', '--default-exclude']
        with patch('sys.argv', ['mcpforge'] + test_args), patch('sys.stdout', stdout):
            main()
        self.assertEqual([t["name"] for t in json.loads(stdout.getvalue())], ["deletePet"])

        stdout = io.StringIO()
        test_args = ['extract', '--spec', 'pets.json', '--exclude-operation-id', 'listPets']
        with patch('sys.argv', ['mcpforge'] + test_args), patch('sys.stdout', stdout):
            main()
        self.assertEqual([t["name"] for t in json.loads(stdout.getvalue())], ["deletePet"])

    @patch('mcpforge.openapi.spec.load_spec_from_file', return_value=SPEC)
    def test_list_prints_tools(self, mock_load, mock_setup):
        stdout = io.StringIO()
        with patch('sys.argv', ['mcpforge', 'list', '--spec', 'pets.json']), patch('sys.stdout', stdout):
            main()
        output = stdout.getvalue()
        self.assertIn("Found 2 tool(s):", output)
        self.assertIn("listPets  GET /pets", output)
        self.assertIn("deletePet  DELETE /pets/{petId}", output)

    def test_extract_without_spec_exits(self, mock_setup):
        with patch('sys.argv', ['mcpforge', 'extract']):
            with self.assertRaises(SystemExit) as context:
                main()
        self.assertEqual(context.exception.code, 1)

    @patch('mcpforge.openapi.spec.load_spec_from_file', side_effect=FileNotFoundError("missing.json"))
    def test_extract_load_failure_exits(self, mock_load, mock_setup):
        with patch('sys.argv', ['mcpforge', 'extract', '--spec', 'missing.json']):
            with self.assertRaises(SystemExit) as context:
                main()
        self.assertEqual(context.exception.code, 1)


if __name__ == '__main__':
    unittest.main()

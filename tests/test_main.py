"""Tests for the main entry point (__main__.py)."""

import io
import json
from unittest.mock import patch

import pytest

from curl_lens.__main__ import main


class TestMain:
    """Tests for the main function."""

    def test_missing_command_file_exits(self):
        """parse_cli calls sys.exit(1) when the file doesn't exist."""
        with pytest.raises(SystemExit):
            main(["--command-file", "/nonexistent/cmd.sh"])

    def test_report_run(self, capsys):
        result = main(["curl -d 'a=1' https://h/"])
        out = capsys.readouterr().out
        assert result == 0
        assert "[*] Parsing curl command..." in out
        assert "Method : POST" in out

    def test_json_output_is_clean(self, capsys):
        result = main(["curl -H 'Authorization: Bearer t' https://h/", "--json"])
        data = json.loads(capsys.readouterr().out)
        assert result == 0
        assert data["request"]["url"] == "https://h/"
        # JSON output is never masked
        assert data["request"]["headers"][0]["value"] == "Bearer t"

    def test_json_encode_url(self, capsys):
        result = main(["curl https://h/a", "--json", "--encode-url"])
        data = json.loads(capsys.readouterr().out)
        assert result == 0
        assert data["request"]["url"] == "https%3A%2F%2Fh%2Fa"

    def test_invalid_command_returns_error(self, capsys):
        result = main(["wget https://h/"])
        assert result == 2
        assert "Error parsing command" in capsys.readouterr().err

    def test_command_file(self, tmp_path, capsys):
        f = tmp_path / "cmd.sh"
        f.write_text("curl -X PUT \\\n  https://h/items/1\n")
        result = main(["--command-file", str(f)])
        out = capsys.readouterr().out
        assert result == 0
        assert f"[*] Loading curl command from: {f}" in out
        assert "Method : PUT" in out

    def test_stdin(self, monkeypatch, capsys):
        monkeypatch.setattr("sys.stdin", io.StringIO("curl -I https://h/\n"))
        result = main(["--command-file", "-", "--json"])
        data = json.loads(capsys.readouterr().out)
        assert result == 0
        assert data["request"]["method"] == "HEAD"

    @patch("curl_lens.__main__.load_command_file")
    def test_read_error_returns_error(self, mock_load, tmp_path):
        f = tmp_path / "cmd.sh"
        f.write_text("curl https://h/")
        mock_load.side_effect = PermissionError("denied")
        assert main(["--command-file", str(f)]) == 2

    def test_warnings_without_strict(self):
        assert main(["curl -k https://h/"]) == 0

    def test_strict_with_warnings(self, capsys):
        assert main(["curl -k https://h/", "--strict"]) == 1
        assert "[INSECURE_TLS]" in capsys.readouterr().out

    def test_strict_without_warnings(self):
        assert main(["curl https://h/", "--strict"]) == 0

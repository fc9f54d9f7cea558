"""Tests for the CLI module."""

import pytest

from curl_lens.cli import build_parser, parse_cli, validate_args


class TestBuildParser:
    """Tests for the argument parser construction."""

    def test_positional_command(self):
        parser = build_parser()
        args = parser.parse_args(["curl https://h/"])
        assert args.command == "curl https://h/"
        assert args.command_file is None

    def test_defaults(self):
        parser = build_parser()
        args = parser.parse_args(["curl https://h/"])
        assert args.as_json is False
        assert args.hide_sensitive is True
        assert args.decode_url is True
        assert args.decode_cookies is True
        assert args.encode_url is False
        assert args.strict is False

    def test_display_flags(self):
        parser = build_parser()
        args = parser.parse_args([
            "curl https://h/",
            "--json",
            "--show-sensitive",
            "--raw-url",
            "--raw-cookies",
            "--strict",
        ])
        assert args.as_json is True
        assert args.hide_sensitive is False
        assert args.decode_url is False
        assert args.decode_cookies is False
        assert args.strict is True

    def test_command_file_argument(self):
        parser = build_parser()
        args = parser.parse_args(["--command-file", "cmd.sh"])
        assert args.command is None
        assert args.command_file == "cmd.sh"

    def test_version_exits(self):
        parser = build_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["--version"])


class TestValidateArgs:
    """Tests for argument validation."""

    def test_no_input_exits(self):
        args = build_parser().parse_args([])
        with pytest.raises(SystemExit):
            validate_args(args)

    def test_both_inputs_exit(self, tmp_path):
        f = tmp_path / "cmd.sh"
        f.write_text("curl https://h/")
        args = build_parser().parse_args(["curl x", "--command-file", str(f)])
        with pytest.raises(SystemExit):
            validate_args(args)

    def test_empty_command_exits(self):
        args = build_parser().parse_args(["   "])
        with pytest.raises(SystemExit):
            validate_args(args)

    def test_nonexistent_file_exits(self, capsys):
        args = build_parser().parse_args(["--command-file", "/nonexistent/cmd.sh"])
        with pytest.raises(SystemExit):
            validate_args(args)
        assert "Command file not found" in capsys.readouterr().err

    def test_valid_file_passes(self, tmp_path):
        f = tmp_path / "cmd.sh"
        f.write_text("curl https://h/")
        args = build_parser().parse_args(["--command-file", str(f)])
        # Should not raise
        validate_args(args)

    def test_stdin_marker_passes(self):
        args = build_parser().parse_args(["--command-file", "-"])
        validate_args(args)


class TestParseCli:
    """Tests for the full parse_cli flow."""

    def test_full_parse_flow(self):
        args = parse_cli(["curl -X POST https://h/", "--json"])
        assert args.command == "curl -X POST https://h/"
        assert args.as_json is True

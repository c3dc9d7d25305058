#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# tests/e2e/test_mdweave_cli.py
"""End-to-end tests for the mdweave command line."""

import io
import sys

import pytest

from mdweave.cli import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_SUCCESS,
    EXIT_TRANSFORM_ERROR,
    main,
)

CALLOUT_SOURCE = ":::warning\nBe careful.\n:::\n"
CALLOUT_HTML = (
    '<doc-content-callout header="Warning" variant="warning">\n'
    "<p>Be careful.</p>\n"
    "</doc-content-callout>\n"
)


@pytest.fixture
def callout_file(tmp_path):
    path = tmp_path / "callout.md"
    path.write_text(CALLOUT_SOURCE, encoding="utf-8")
    return path


@pytest.mark.e2e
@pytest.mark.cli
class TestRenderCommand:
    """Tests for rendering files from the command line."""

    def test_stdout(self, callout_file, capsys):
        """Test HTML goes to standard output with a final newline."""
        assert main([str(callout_file)]) == EXIT_SUCCESS
        assert capsys.readouterr().out == CALLOUT_HTML

    def test_output_file(self, callout_file, tmp_path, capsys):
        """Test -o writes the file and nothing to standard output."""
        target = tmp_path / "out.html"
        assert main([str(callout_file), "-o", str(target)]) == EXIT_SUCCESS

        assert target.read_text(encoding="utf-8") == CALLOUT_HTML.rstrip("\n")
        assert capsys.readouterr().out == ""

    def test_sample_document(self, markdown_file, capsys):
        """Test a mixed document renders callout and video."""
        assert main([str(markdown_file)]) == EXIT_SUCCESS
        out = capsys.readouterr().out

        assert "<doc-content-callout" in out
        assert 'class="video-plugin-div"' in out

    def test_stdin(self, monkeypatch, capsys):
        """Test '-' reads Markdown from standard input."""
        stdin = io.TextIOWrapper(io.BytesIO(CALLOUT_SOURCE.encode("utf-8")), encoding="utf-8")
        monkeypatch.setattr(sys, "stdin", stdin)

        assert main(["-"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == CALLOUT_HTML

    def test_no_rules(self, callout_file, capsys):
        """Test --no-rules leaves the container as a div."""
        assert main([str(callout_file), "--no-rules"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "<div>\n<p>Be careful.</p>\n</div>\n"

    def test_rules_subset(self, tmp_path, capsys):
        """Test --rules limits the applied rules."""
        path = tmp_path / "both.md"
        path.write_text(CALLOUT_SOURCE + '\n::video{src="v" title="t" type="local"}\n', encoding="utf-8")

        assert main([str(path), "--rules", "video"]) == EXIT_SUCCESS
        out = capsys.readouterr().out
        assert "<doc-content-callout" not in out
        assert "<video controls>" in out

    def test_stages(self, callout_file, capsys):
        """Test --stages prints every intermediate stage."""
        assert main([str(callout_file), "--stages"]) == EXIT_SUCCESS
        out = capsys.readouterr().out

        assert "Stage 1" in out
        assert "Stage 2" in out
        assert "Stage 3" in out
        assert "doc-content-callout" in out

    def test_list_rules(self, capsys):
        """Test --list-rules shows the built-in rules."""
        assert main(["--list-rules"]) == EXIT_SUCCESS
        out = capsys.readouterr().out

        assert "callout" in out
        assert "video" in out

    def test_safe_html(self, tmp_path, capsys):
        """Test author HTML is kept unless --safe-html is given."""
        path = tmp_path / "raw.md"
        path.write_text("Hi <b>there</b>\n", encoding="utf-8")

        assert main([str(path)]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "<p>Hi <b>there</b></p>\n"
        assert main([str(path), "--safe-html"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "<p>Hi there</p>\n"


@pytest.mark.e2e
@pytest.mark.cli
class TestConfigFiles:
    """Tests for configuration handling from the command line."""

    def test_discovered_config(self, callout_file, tmp_path, capsys):
        """Test a config file in the working directory is used."""
        (tmp_path / ".mdweave.toml").write_text('[callout]\ntag_name = "aside"\n', encoding="utf-8")

        assert main([str(callout_file)]) == EXIT_SUCCESS
        assert capsys.readouterr().out.startswith('<aside header="Warning"')

    def test_no_config(self, callout_file, tmp_path, capsys):
        """Test --no-config ignores discovered files."""
        (tmp_path / ".mdweave.toml").write_text("rules = []\n", encoding="utf-8")

        assert main([str(callout_file), "--no-config"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == CALLOUT_HTML

    def test_explicit_config(self, callout_file, tmp_path, capsys):
        """Test --config names a YAML file."""
        config = tmp_path / "settings.yaml"
        config.write_text("html:\n  trailing_newline: true\nrules: []\n", encoding="utf-8")

        assert main([str(callout_file), "--config", str(config)]) == EXIT_SUCCESS
        assert capsys.readouterr().out == "<div>\n<p>Be careful.</p>\n</div>\n"

    def test_flags_override_config(self, tmp_path, capsys):
        """Test command line flags beat the config file."""
        (tmp_path / ".mdweave.toml").write_text("[video]\nstrict = false\n", encoding="utf-8")
        path = tmp_path / "v.md"
        path.write_text('::video{type="vimeo"}\n', encoding="utf-8")

        assert main([str(path), "--strict-video"]) == EXIT_TRANSFORM_ERROR


@pytest.mark.e2e
@pytest.mark.cli
class TestErrors:
    """Tests for error reporting and exit codes."""

    def test_missing_input_argument(self, capsys):
        """Test an input is required unless listing rules."""
        assert main([]) == EXIT_CONFIG_ERROR
        assert "Input file is required" in capsys.readouterr().err

    def test_input_not_found(self, tmp_path, capsys):
        """Test a missing file is reported."""
        assert main([str(tmp_path / "nope.md")]) == EXIT_ERROR
        assert "Input file not found" in capsys.readouterr().err

    def test_unknown_rule(self, callout_file, capsys):
        """Test unknown rule names are configuration errors."""
        assert main([str(callout_file), "--rules", "sparkle"]) == EXIT_CONFIG_ERROR
        assert "sparkle" in capsys.readouterr().err

    def test_strict_video(self, tmp_path, capsys):
        """Test an unknown video type fails in strict mode."""
        path = tmp_path / "v.md"
        path.write_text('::video{src="x" type="vimeo"}\n', encoding="utf-8")

        assert main([str(path), "--strict-video"]) == EXIT_TRANSFORM_ERROR
        assert "vimeo" in capsys.readouterr().err

    def test_invalid_config(self, callout_file, tmp_path, capsys):
        """Test an invalid config file is a configuration error."""
        config = tmp_path / "bad.json"
        config.write_text('{"video": {"loud": true}}', encoding="utf-8")

        assert main([str(callout_file), "--config", str(config)]) == EXIT_CONFIG_ERROR
        assert "video.loud" in capsys.readouterr().err

    def test_version(self, capsys):
        """Test --version prints the version and exits."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])
        assert exc_info.value.code == 0
        assert "mdweave" in capsys.readouterr().out

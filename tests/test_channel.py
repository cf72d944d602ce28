"""Tests for node channels and the path length query."""

import os
import subprocess
import sys
from unittest.mock import MagicMock, patch

import pytest

from shortwspath.channel import LocalChannel, MaxPathLengthQuery, SshChannel
from shortwspath.config import PathLimits
from shortwspath.errors import ProbeError


class TestMaxPathLengthQuery:
    """Tests for MaxPathLengthQuery."""

    def test_posix_output(self):
        assert MaxPathLengthQuery().parse("Linux\n") == 4096
        assert MaxPathLengthQuery().parse("Darwin\n") == 4096

    @pytest.mark.parametrize("output", [
        "MINGW64_NT-10.0-19045\n",
        "CYGWIN_NT-10.0\n",
        "MSYS_NT-10.0\n",
        "Windows_NT\r\n",
    ])
    def test_windows_output(self, output):
        assert MaxPathLengthQuery().parse(output) == 260

    def test_command_missing_means_windows_shell(self):
        assert MaxPathLengthQuery().command_missing() == 260

    def test_custom_limits(self):
        query = MaxPathLengthQuery(PathLimits(windows=1024, posix=255))
        assert query.parse("MINGW64_NT") == 1024
        assert query.parse("Linux") == 255
        assert query.command_missing() == 1024

    @patch("shortwspath.channel.sys")
    def test_local_on_linux(self, mock_sys):
        mock_sys.platform = "linux"
        assert MaxPathLengthQuery().local() == 4096

    @patch("shortwspath.channel.sys")
    def test_local_on_windows(self, mock_sys):
        mock_sys.platform = "win32"
        assert MaxPathLengthQuery().local() == 260


class TestLocalChannel:
    """Tests for LocalChannel."""

    def test_runs_in_process(self):
        query = MagicMock()
        query.local.return_value = 123
        assert LocalChannel().run(query) == 123


class TestSshChannel:
    """Tests for SshChannel."""

    @patch("shortwspath.channel.subprocess.run")
    def test_parses_remote_output(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="MINGW64_NT-10.0\n", stderr="")
        assert SshChannel("win-1").run(MaxPathLengthQuery()) == 260

    @patch("shortwspath.channel.subprocess.run")
    def test_command_line(self, mock_run):
        mock_run.return_value = MagicMock(returncode=0, stdout="Linux\n", stderr="")
        SshChannel("host", user="jenkins", port=2222, timeout=5).run(MaxPathLengthQuery())

        args, kwargs = mock_run.call_args
        assert args[0] == [
            "ssh", "-o", "BatchMode=yes", "-p", "2222", "jenkins@host", "uname -s",
        ]
        assert kwargs["timeout"] == 5
        assert kwargs["errors"] == "replace"

    @patch("shortwspath.channel.subprocess.run")
    def test_powershell_without_uname(self, mock_run):
        mock_run.return_value = MagicMock(
            returncode=1,
            stdout="",
            stderr="uname : The term 'uname' is not recognized as the name of a cmdlet\n",
        )
        assert SshChannel("win-1").run(MaxPathLengthQuery()) == 260

    @patch("shortwspath.channel.subprocess.run")
    def test_cmd_without_uname(self, mock_run):
        mock_run.return_value = MagicMock(
            returncode=1,
            stdout="",
            stderr="'uname' is not recognized as an internal or external command\n",
        )
        assert SshChannel("win-1").run(MaxPathLengthQuery()) == 260

    @patch("shortwspath.channel.subprocess.run")
    def test_connection_failure(self, mock_run):
        mock_run.return_value = MagicMock(returncode=255, stdout="", stderr="Connection refused\n")
        with pytest.raises(ProbeError) as exc_info:
            SshChannel("host").run(MaxPathLengthQuery())
        assert "Connection refused" in str(exc_info.value)

    @patch("shortwspath.channel.subprocess.run")
    def test_timeout(self, mock_run):
        mock_run.side_effect = subprocess.TimeoutExpired(cmd="ssh", timeout=30)
        with pytest.raises(ProbeError):
            SshChannel("host").run(MaxPathLengthQuery())

    @patch("shortwspath.channel.subprocess.run")
    def test_missing_ssh(self, mock_run):
        mock_run.side_effect = FileNotFoundError("ssh")
        with pytest.raises(ProbeError):
            SshChannel("host").run(MaxPathLengthQuery())

    @patch("shortwspath.channel.subprocess.run")
    def test_undecodable_output(self, mock_run):
        mock_run.side_effect = UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        with pytest.raises(ProbeError):
            SshChannel("host").run(MaxPathLengthQuery())


@pytest.mark.skipif(sys.platform.startswith("win"), reason="needs a POSIX shell")
class TestSshChannelBinaryOutput:
    """Non UTF-8 bytes from ssh are tolerated."""

    @pytest.fixture
    def fake_ssh(self, tmp_path, monkeypatch):
        """Put an ssh on PATH that prints a binary banner on stderr."""
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir()
        script = bin_dir / "ssh"
        script.write_text(
            "#!/bin/sh\n"
            "printf '\\377\\376 banner\\n' >&2\n"
            "echo Linux\n"
        )
        script.chmod(0o755)
        monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
        return script

    def test_banner_with_invalid_bytes(self, fake_ssh):
        assert SshChannel("worker").run(MaxPathLengthQuery()) == 4096

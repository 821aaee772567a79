"""Tests for ShellCommandExecutor and the HDFS listing it feeds."""

import httpx
import pytest

from conftest import BASE_URL, master_handler
from hbase_diag.collection import BundleCollector, CommandError, ShellCommandExecutor, StorageLayout


class TestShellCommandExecutor:
    def test_returns_stdout(self):
        assert ShellCommandExecutor(timeout=5).execute("echo hello") == b"hello\n"

    def test_non_utf8_output_is_returned_as_is(self):
        assert ShellCommandExecutor(timeout=5).execute("printf 'ok\\377\\n'") == b"ok\xff\n"

    def test_non_zero_exit_raises_with_stderr(self):
        with pytest.raises(CommandError) as excinfo:
            ShellCommandExecutor(timeout=5).execute("echo 'no such path' >&2; exit 3")
        assert "exited with code 3" in str(excinfo.value)
        assert "no such path" in str(excinfo.value)

    def test_undecodable_stderr_still_reported(self):
        with pytest.raises(CommandError) as excinfo:
            ShellCommandExecutor(timeout=5).execute("printf 'bad\\377' >&2; exit 1")
        assert "bad" in str(excinfo.value)

    def test_timeout_raises(self):
        with pytest.raises(CommandError) as excinfo:
            ShellCommandExecutor(timeout=0.1).execute("sleep 5")
        assert "timed out after 0.1s" in str(excinfo.value)


def test_listing_with_odd_bytes_is_written(tmp_path):
    layout = StorageLayout(root_dir="/hbase", list_command="printf 'ok\\377\\n' ; true")
    with httpx.Client(transport=httpx.MockTransport(master_handler())) as client:
        collector = BundleCollector(http=client, executor=ShellCommandExecutor(timeout=5), layout=layout)
        report = collector.collect(BASE_URL, [], tmp_path)

    assert report.failed == []
    assert (tmp_path / "hdfs" / "hdfs-files.list").read_bytes() == b"ok\xff\n"

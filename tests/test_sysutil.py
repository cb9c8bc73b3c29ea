import ipaddress
import signal
import subprocess

import pytest

from opskit import sysutil


def test_cmd_out_string_and_trim():
    assert sysutil.cmd_out_string("echo", "hello") == "hello\n"
    assert sysutil.cmd_out_trim("echo", "hello") == "hello"


def test_cmd_out_bytes_combines_streams():
    out = sysutil.cmd_out_bytes("sh", "-c", "echo out; echo err 1>&2")
    assert b"out" in out
    assert b"err" in out


def test_cmd_errors():
    with pytest.raises(subprocess.CalledProcessError):
        sysutil.cmd_out_bytes("sh", "-c", "exit 3")
    with pytest.raises(subprocess.CalledProcessError):
        sysutil.cmd_run("false")


def test_cmd_run_timeout_finishes():
    output, code, timed_out = sysutil.cmd_run_timeout(5, "sh", "-c", "echo hi")
    assert output == "hi\n"
    assert code == 0
    assert timed_out is False


def test_cmd_run_timeout_kills():
    _, code, timed_out = sysutil.cmd_run_timeout(0.2, "sleep", "5")
    assert timed_out is True
    assert code == -signal.SIGKILL


@pytest.mark.parametrize(
    "ip,expected",
    [
        ("10.0.0.1", True),
        ("100.64.0.1", True),
        ("192.168.1.1", True),
        ("172.16.0.1", True),
        ("172.31.255.255", True),
        ("172.32.0.1", False),
        ("172.15.0.1", False),
        ("172.abc", False),
        ("8.8.8.8", False),
    ],
)
def test_is_intranet(ip, expected):
    assert sysutil.is_intranet(ip) is expected


def test_intranet_ips_are_intranet():
    ips = sysutil.intranet_ips()
    assert all(sysutil.is_intranet(ip) for ip in ips)


def test_outbound_ipaddr_shape():
    result = sysutil.outbound_ipaddr()
    assert result == "" or ipaddress.ip_address(result).version == 4


def test_local_host_ident_ends_with_ip():
    ident = sysutil.local_host_ident()
    ips = sysutil.intranet_ips()
    assert ident.endswith("-" + (ips[0] if ips else ""))


def test_kill_blank_rejected():
    with pytest.raises(ValueError, match="cmdline is blank"):
        sysutil.kill_process_by_cmdline("   ")


def test_pids_by_cmdline_and_kill():
    proc = subprocess.Popen(["sleep", "98765"])
    try:
        assert proc.pid in sysutil.pids_by_cmdline("sleep98765")
        sysutil.kill_process_by_cmdline("sleep98765")
        assert proc.wait(timeout=5) == -signal.SIGKILL
    finally:
        if proc.poll() is None:
            proc.kill()
            proc.wait()
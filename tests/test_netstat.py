import pytest

from opskit.nux import netstat

NETSTAT_TEXT = (
    "TcpExt: SyncookiesSent SyncookiesRecv\n"
    "TcpExt: 0 5\n"
    "IpExt: InNoRoutes InOctets\n"
    "IpExt: 1 200\n"
)


def test_parse_netstat_section():
    assert netstat.parse_netstat(NETSTAT_TEXT, "IpExt") == {"InNoRoutes": 1, "InOctets": 200}
    assert netstat.parse_netstat(NETSTAT_TEXT, "TcpExt") == {"SyncookiesSent": 0, "SyncookiesRecv": 5}


def test_parse_netstat_missing_section():
    assert netstat.parse_netstat(NETSTAT_TEXT, "MptcpExt") == {}


def test_parse_netstat_header_without_values():
    with pytest.raises(ValueError):
        netstat.parse_netstat("TcpExt: A B\n", "TcpExt")


def test_parse_netstat_bad_number():
    with pytest.raises(ValueError):
        netstat.parse_netstat("TcpExt: A\nTcpExt: -1\n", "TcpExt")


def test_parse_snmp_allows_negative():
    text = "Udp: InDatagrams NoPorts\nUdp: 10 -2\n"
    assert netstat.parse_snmp(text, "Udp") == {"InDatagrams": 10, "NoPorts": -2}


def test_parse_sockstat():
    text = "sockets: used 120\nTCP: inuse 5 orphan 0 tw 2 alloc 7 mem 1\nUDP: inuse 1 mem 0\n"
    assert netstat.parse_sockstat(text) == {
        "sockets.used": 120,
        "sockets.tcp.inuse": 5,
        "sockets.tcp.timewait": 2,
    }


def test_parse_sockstat_without_tcp_line():
    with pytest.raises(ValueError):
        netstat.parse_sockstat("sockets: used 3\n")


def test_parse_ss_summary():
    text = (
        "Total: 175\n"
        "TCP:   11 (estab 3, closed 1, orphaned 0, synrecv 0, timewait 4/6), ports 0\n"
        "Transport Total     IP        IPv6\n"
    )
    assert netstat.parse_ss_summary(text) == {
        "estab": 3,
        "closed": 1,
        "orphaned": 0,
        "synrecv": 0,
        "timewait": 4,
        "slabinfo.timewait": 6,
    }


def test_parse_ss_summary_without_tcp():
    with pytest.raises(ValueError):
        netstat.parse_ss_summary("Total: 175\n")


def test_parse_listening_ports():
    output = (
        "State Recv-Q Send-Q Local Address:Port Peer Address:Port\n"
        "LISTEN 0 128 0.0.0.0:22 0.0.0.0:*\n"
        "LISTEN 0 128 [::]:22 [::]:*\n"
        "LISTEN 0 5 127.0.0.1:631 0.0.0.0:*\n"
    )
    assert sorted(netstat.parse_listening_ports(output)) == [22, 631]


def test_parse_listening_ports_four_columns():
    output = "Recv-Q Send-Q Local Peer\n0 0 0.0.0.0:68 0.0.0.0:*\n"
    assert netstat.parse_listening_ports(output) == [68]


def test_parse_listening_ports_only_header():
    assert netstat.parse_listening_ports("State Recv-Q Send-Q Local Peer\n") == []


@pytest.mark.parametrize(
    "output",
    [
        "",
        "header\nLISTEN 0\n",
        "header\nLISTEN 0 128 0.0.0.0:* 0.0.0.0:*\n",
    ],
)
def test_parse_listening_ports_errors(output):
    with pytest.raises(ValueError):
        netstat.parse_listening_ports(output)
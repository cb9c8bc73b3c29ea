import pytest

from opskit.pool import ConnPool, MaxConnectionsError


class FakeConn:
    def __init__(self, name):
        self.name = name
        self.closed = False

    def close(self):
        self.closed = True


def make_pool(max_conns=2, max_idle=2):
    return ConnPool("p", "localhost:1", max_conns, max_idle, new=FakeConn)


def test_fetch_opens_named_connection():
    pool = make_pool()
    conn = pool.fetch()
    assert conn.name.startswith("p_0_")
    assert pool.cnt == 1
    assert pool.proc() == "Name:p,Cnt:1,active:1,all:1,free:0"


def test_fetch_over_limit_raises():
    pool = make_pool(max_conns=1)
    pool.fetch()
    with pytest.raises(MaxConnectionsError, match="maximum connections reached"):
        pool.fetch()


def test_release_then_fetch_reuses():
    pool = make_pool()
    conn = pool.fetch()
    pool.release(conn)
    assert pool.fetch() is conn
    assert conn.closed is False
    assert pool.cnt == 1


def test_release_closes_when_idle_full():
    pool = make_pool(max_idle=0)
    conn = pool.fetch()
    pool.release(conn)
    assert conn.closed is True
    assert "all:0" in pool.proc()
    assert "active:0" in pool.proc()


def test_force_close_frees_a_slot():
    pool = make_pool(max_conns=1)
    conn = pool.fetch()
    pool.force_close(conn)
    assert conn.closed is True
    other = pool.fetch()
    assert other is not conn
    assert other.name.startswith("p_1_")


def test_factory_error_propagates():
    def broken(name):
        raise ConnectionError("refused")

    pool = ConnPool("p", "localhost:1", 1, 1, new=broken)
    with pytest.raises(ConnectionError):
        pool.fetch()
    assert pool.cnt == 0
    assert "active:0" in pool.proc()


def test_missing_factory_raises():
    pool = ConnPool("p", "localhost:1", 1, 1)
    with pytest.raises(RuntimeError):
        pool.fetch()
import threading

from opskit.container.sets import IntSet, SafeInt64Set, SafeSet, StringSet


def test_safe_set_add_contains_size():
    ss = SafeSet()
    ss.add("a1")
    assert ss.contains("a1") and ss.size() == 1


def test_safe_set_remove():
    ss = SafeSet()
    ss.add("a1")
    ss.add("a2")
    ss.remove("a1")
    ss.remove("a3")
    assert not ss.contains("a1") and ss.contains("a2")
    ss.remove("a2")
    assert not ss.contains("a2") and ss.size() == 0


def test_safe_set_clear():
    ss = SafeSet()
    ss.add("a1")
    ss.clear()
    assert ss.size() == 0


def test_safe_set_to_list():
    ss = SafeSet()
    ss.add("a1")
    ss.add("a2")
    ss.add("a1")
    ar = ss.to_list()
    assert len(ar) == 2 and "a1" in ar and "a2" in ar


def test_safe_set_concurrent_adds():
    ss = SafeSet()
    keys = [str(i) for i in range(2000)]

    def worker(chunk):
        for key in chunk:
            ss.add(key)

    threads = [threading.Thread(target=worker, args=(keys[i::4],)) for i in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert ss.size() == len(keys)
    assert sorted(ss.to_list()) == sorted(keys)


def test_int_set_operations():
    s = IntSet()
    assert s.add(1).add(2).add(1) is s
    assert s.exists(1) and s.exists(2) and not s.exists(3)
    assert sorted(s.to_list()) == [1, 2]
    s.delete(1)
    s.delete(99)
    assert s.to_list() == [2]
    s.clear()
    assert s.to_list() == []
    assert len(s) == 0


def test_string_set_operations():
    s = StringSet()
    s.add("x").add("y")
    assert "x" in s and s.exists("y")
    s.delete("x")
    assert not s.exists("x")
    assert s.to_list() == ["y"]
    s.clear()
    assert s.to_list() == []


def test_safe_int64_set_operations():
    s = SafeInt64Set()
    assert s.add(5) is s
    s.add(5)
    assert s.size() == 1 and s.contains(5)
    assert s.adds([1, 2, 5]) is s
    assert sorted(s.to_list()) == [1, 2, 5]
    assert s.adds([]) is s
    assert s.size() == 3
    s.clear()
    assert s.size() == 0 and not s.contains(5)


def test_safe_int64_set_str():
    s = SafeInt64Set()
    assert str(s) == "[]"
    s.add(7)
    assert str(s) == "[7]"
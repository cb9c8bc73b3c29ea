from datetime import datetime, timedelta

import pytest

from opskit.log.file_backend import FileBackend, hour_tag, should_delete
from opskit.log.logger import Severity


@pytest.fixture
def backend(tmp_path):
    fb = FileBackend(str(tmp_path))
    yield fb
    fb.close()


def test_creates_one_file_per_severity(tmp_path):
    fb = FileBackend(str(tmp_path))
    try:
        names = sorted(p.name for p in tmp_path.iterdir())
    finally:
        fb.close()
    assert names == sorted(f"{s.name}.log" for s in Severity)


def test_log_goes_to_severity_file(tmp_path):
    fb = FileBackend(str(tmp_path))
    try:
        fb.log(Severity.INFO, b"hello info\n")
        fb.log(Severity.ERROR, b"hello error\n")
        fb.flush()
    finally:
        fb.close()
    assert (tmp_path / "INFO.log").read_bytes() == b"hello info\n"
    assert (tmp_path / "ERROR.log").read_bytes() == b"hello error\n"
    assert (tmp_path / "DEBUG.log").read_bytes() == b""


def test_fall_copies_severe_lines_into_info(tmp_path):
    fb = FileBackend(str(tmp_path))
    try:
        fb.fall()
        fb.log(Severity.WARNING, b"warn\n")
        fb.log(Severity.DEBUG, b"dbg\n")
        fb.flush()
    finally:
        fb.close()
    assert (tmp_path / "INFO.log").read_bytes() == b"warn\n"
    assert (tmp_path / "WARNING.log").read_bytes() == b"warn\n"


def test_size_rotation(tmp_path):
    fb = FileBackend(str(tmp_path))
    try:
        fb.rotate(2, 10)
        fb.log(Severity.INFO, b"aaaaa\n")
        fb.log(Severity.INFO, b"bbbbb\n")
        fb.flush()
    finally:
        fb.close()
    assert (tmp_path / "INFO.log.000").read_bytes() == b"aaaaa\n"
    assert (tmp_path / "INFO.log").read_bytes() == b"bbbbb\n"


def test_appends_to_existing_file(tmp_path):
    (tmp_path / "INFO.log").write_bytes(b"old\n")
    fb = FileBackend(str(tmp_path))
    try:
        fb.log(Severity.INFO, b"new\n")
        fb.flush()
    finally:
        fb.close()
    assert (tmp_path / "INFO.log").read_bytes() == b"old\nnew\n"


def test_set_flush_duration_has_floor(backend):
    backend.set_flush_duration(0.2)
    assert backend.flush_interval == 1.0
    backend.set_flush_duration(7.5)
    assert backend.flush_interval == 7.5


def test_set_rotate_by_hour(backend):
    backend.set_rotate_by_hour(True)
    assert backend.last_check >= hour_tag(datetime.now() - timedelta(hours=1))
    backend.set_rotate_by_hour(False)
    assert backend.last_check == 0


def test_hour_tag_format():
    assert hour_tag(datetime(2016, 7, 11, 14, 30)) == 2016071114


def test_should_delete():
    assert should_delete("INFO.log.2000010100", 1) is True
    assert should_delete("INFO.log.2999010100", 1) is False
    assert should_delete("INFO.log.notanumber", 1) is False
    assert should_delete("INFO.log", 1) is False


def test_hourly_rotation_renames_files(backend, tmp_path):
    backend.set_rotate_by_hour(True)
    old = hour_tag(datetime.now() - timedelta(hours=1))
    backend.last_check = old
    backend.log(Severity.INFO, b"before\n")
    backend._rotate_by_hour_once()
    backend.log(Severity.INFO, b"after\n")
    backend.flush()
    assert (tmp_path / f"INFO.log.{old}").read_bytes() == b"before\n"
    assert (tmp_path / "INFO.log").read_bytes() == b"after\n"
    assert backend.last_check > old


def test_hourly_rotation_deletes_old_files(tmp_path):
    stale = tmp_path / "INFO.log.2000010100"
    stale.write_bytes(b"x")
    keep = tmp_path / "notes.txt"
    keep.write_bytes(b"y")
    fb = FileBackend(str(tmp_path))
    try:
        fb.set_rotate_by_hour(True)
        fb._rotate_by_hour_once()
    finally:
        fb.close()
    assert (stale.exists(), keep.exists()) == (False, True)


def test_deleted_file_is_recreated(tmp_path):
    fb = FileBackend(str(tmp_path))
    try:
        (tmp_path / "DEBUG.log").unlink()
        fb._monitor_once()
        fb.log(Severity.DEBUG, b"back\n")
        fb.flush()
    finally:
        fb.close()
    assert (tmp_path / "DEBUG.log").read_bytes() == b"back\n"


def test_log_after_close_raises(tmp_path):
    fb = FileBackend(str(tmp_path))
    fb.close()
    with pytest.raises(ValueError):
        fb.log(Severity.INFO, b"late\n")
from pathlib import Path

from thumbnailer.scratch import ScratchSpace


def test_close_removes_every_file(tmp_path: Path) -> None:
    with ScratchSpace(tmp_path / "work") as scratch:
        a = scratch.file("a.mp4")
        b = scratch.file("b.png")
        scratch.file("never-written.gif")
        a.path.write_bytes(b"a")
        b.path.write_bytes(b"b")

    assert list((tmp_path / "work").iterdir()) == []
    assert scratch.files == []


def test_release_is_idempotent(tmp_path: Path) -> None:
    scratch = ScratchSpace(tmp_path)
    f = scratch.file("x.gif")
    f.path.write_bytes(b"x")

    assert scratch.release(f)
    assert scratch.release(f)
    assert not f.exists()


def test_deletion_failure_is_reported_not_raised(tmp_path: Path) -> None:
    scratch = ScratchSpace(tmp_path)
    # A directory cannot be unlinked like a file
    stuck = scratch.file("stuck")
    stuck.path.mkdir()

    assert scratch.close() is False
    assert stuck.path.exists()


def test_reserving_the_same_name_twice_tracks_it_once(tmp_path: Path) -> None:
    scratch = ScratchSpace(tmp_path)
    scratch.file("x.gif")
    scratch.file("x.gif")
    assert len(scratch.files) == 1

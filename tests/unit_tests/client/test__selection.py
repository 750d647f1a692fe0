from clouddrive.client.selection import FileSelection, PendingFile


def make_file(name: str, content: bytes = b"abc") -> PendingFile:
    return PendingFile.from_bytes(name, content)


def test_same_name_and_size_is_added_once():
    selection = FileSelection()

    added = selection.add([make_file("a.txt", b"abc"), make_file("a.txt", b"xyz")])

    assert added == 1
    assert len(selection) == 1


def test_same_name_different_size_is_added_twice():
    selection = FileSelection()

    selection.add([make_file("a.txt", b"abc")])
    selection.add([make_file("a.txt", b"abcd")])

    assert [file.size for file in selection] == [3, 4]


def test_remove_and_clear():
    selection = FileSelection([make_file("a.txt"), make_file("b.txt"), make_file("c.txt")])

    removed = selection.remove(1)

    assert removed.name == "b.txt"
    assert [file.name for file in selection] == ["a.txt", "c.txt"]

    selection.clear()
    assert not selection
    assert selection.files == []


def test_from_path_guesses_content_type(tmp_path):
    path = tmp_path / "page.html"
    path.write_bytes(b"<html></html>")

    pending = PendingFile.from_path(path)

    assert pending.name == "page.html"
    assert pending.size == 13
    assert pending.content_type == "text/html"
    assert pending.identity == ("page.html", 13)


def test_unknown_extension_has_empty_content_type():
    assert make_file("data.zzz").content_type == ""

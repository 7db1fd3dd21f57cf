import os
import tempfile
from unittest.mock import patch

import pytest
from splitmark.errors import FrontMatterError
from splitmark.save import (
    build_front_matter,
    compose_document,
    resolve_user,
    save_document,
)


def test_saved_file_has_exact_front_matter_format():
    with tempfile.TemporaryDirectory() as temp_dir:
        target = os.path.join(temp_dir, "note.md")
        ok, error = save_document(target, "hello", "alice", "1m30s")
        assert ok
        assert error is None
        with open(target, 'r', encoding='utf-8') as f:
            content = f.read()
        assert content == '---\nuser = "alice"\ntime = "1m30s"\n---\nhello'


def test_save_overwrites_existing_file():
    with tempfile.NamedTemporaryFile(mode='w', suffix='.md', delete=False) as f:
        f.write("Old content")
        temp_filename = f.name
    try:
        ok, _ = save_document(temp_filename, "New content\nLine 2", "bob", "5s")
        assert ok
        with open(temp_filename, 'r', encoding='utf-8') as f:
            content = f.read()
        assert "Old content" not in content
        assert content.endswith("---\nNew content\nLine 2")
    finally:
        if os.path.exists(temp_filename):
            os.remove(temp_filename)


def test_empty_content_still_gets_front_matter():
    assert compose_document("", "alice", "0s") == '---\nuser = "alice"\ntime = "0s"\n---\n'


def test_front_matter_keeps_field_order():
    block = build_front_matter({"user": "a", "time": "1s", "title": "x"})
    assert block.splitlines() == ['---', 'user = "a"', 'time = "1s"', 'title = "x"', '---']


def test_front_matter_escapes_quotes():
    block = build_front_matter({"user": 'say "hi"\\'})
    assert 'user = "say \\"hi\\"\\\\"' in block


@pytest.mark.parametrize("key", ["", "two words", "a=b", 3])
def test_front_matter_rejects_bad_keys(key):
    with pytest.raises(FrontMatterError):
        build_front_matter({key: "value"})


def test_resolve_user_from_home_directory():
    assert resolve_user("/home/alice") == "alice"
    assert resolve_user("/Users/bob/") == "bob"


def test_resolve_user_falls_back_to_placeholder():
    assert resolve_user("/") == "unknown"
    with patch("splitmark.save.Path.home", side_effect=RuntimeError("no home")):
        assert resolve_user() == "unknown"


def test_save_to_missing_directory_reports_error():
    with tempfile.TemporaryDirectory() as temp_dir:
        target = os.path.join(temp_dir, "missing", "note.md")
        ok, error = save_document(target, "hello", "alice", "1s")
        assert not ok
        assert error == "directory does not exist"
        assert not os.path.exists(target)


def test_save_to_directory_path_reports_error():
    with tempfile.TemporaryDirectory() as temp_dir:
        ok, error = save_document(temp_dir, "hello", "alice", "1s")
        assert not ok
        assert error
        assert os.path.isdir(temp_dir)
        assert os.listdir(temp_dir) == []

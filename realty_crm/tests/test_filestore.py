"""Test the upload file store."""

from __future__ import annotations

import pytest

from realty_crm.storage.filestore import FileStore, StorageError, build_key, safe_filename


def test_put_read_delete(tmp_path):
    store = FileStore(tmp_path, "/files/")
    key = "property-images/abc/1_front.jpg"

    store.put_bytes(key, b"data")
    assert store.exists(key)
    assert store.read_bytes(key) == b"data"
    assert store.url_for(key) == "/files/property-images/abc/1_front.jpg"

    assert store.delete(key) is True
    assert store.delete(key) is False
    with pytest.raises(StorageError):
        store.read_bytes(key)


@pytest.mark.parametrize("key", ["../etc/passwd", "/abs/path", "a/../../b", ""])
def test_rejects_escaping_keys(tmp_path, key):
    with pytest.raises(StorageError):
        FileStore(tmp_path).path_for(key)


def test_safe_filename():
    assert safe_filename("../../My Contract (final).pdf") == "My_Contract_final_.pdf"
    assert safe_filename("C:\\docs\\deed.pdf") == "deed.pdf"
    assert safe_filename("...") == "file"


def test_build_key_layout():
    key = build_key("deal-documents", "deal-1", "offer letter.pdf")
    bucket, owner, name = key.split("/")
    assert bucket == "deal-documents"
    assert owner == "deal-1"
    assert name.endswith("_offer_letter.pdf")

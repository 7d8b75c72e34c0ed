"""Simulated ledger and content store."""

import re

import pytest

from educert.blockchain import Ledger
from educert.errors import LedgerError, ValidationFailed
from educert.ipfs import ContentStore


def test_issue_returns_transaction_hash():
    tx = Ledger().issue("cert_1", "abc")
    assert re.fullmatch(r"0x[0-9a-f]{64}", tx)


def test_duplicate_id_rejected():
    ledger = Ledger()
    ledger.issue("cert_1", "abc")
    with pytest.raises(LedgerError):
        ledger.issue("cert_1", "def")
    assert ledger.lookup("cert_1") == "abc"


def test_verify_compares_anchored_digest():
    ledger = Ledger()
    ledger.issue("cert_1", "abc")
    assert ledger.verify("cert_1", "abc")
    assert not ledger.verify("cert_1", "xyz")
    assert not ledger.verify("cert_2", "abc")
    assert ledger.lookup("cert_2") is None


def test_upload_returns_content_reference():
    ref = ContentStore().upload(["transcript.pdf", "photo.PNG"])
    assert re.fullmatch(r"Qm[0-9a-z]{44}", ref)


def test_upload_limits_file_count():
    with pytest.raises(ValidationFailed):
        ContentStore().upload([f"f{i}.pdf" for i in range(6)])


def test_upload_rejects_unsupported_type():
    with pytest.raises(ValidationFailed):
        ContentStore().upload(["notes.docx"])


def test_network_delay_is_slept(monkeypatch):
    naps = []
    monkeypatch.setattr("educert.blockchain.time.sleep", naps.append)
    Ledger(delay=0.25).issue("cert_1", "abc")
    ContentStore(delay=0.5).upload(["diploma.pdf"])
    assert naps == [0.25, 0.5]


def test_no_delay_skips_sleep(monkeypatch):
    naps = []
    monkeypatch.setattr("educert.blockchain.time.sleep", naps.append)
    Ledger().issue("cert_1", "abc")
    ContentStore().upload(["diploma.pdf"])
    assert naps == []


def test_discard_removes_anchor():
    ledger = Ledger()
    ledger.issue("cert_1", "abc")
    ledger.discard("cert_1")
    assert ledger.lookup("cert_1") is None
    ledger.issue("cert_1", "abc")

"""Tests for id and secret-code generation."""
import re
from concurrent.futures import ThreadPoolExecutor

import pytest

from complaint_portal_modules import eventlog, ids
from complaint_portal_modules.ids import IdGenerator


@pytest.fixture(autouse=True)
def log_dir(tmp_path):
    eventlog.configure(str(tmp_path / 'logs'))
    yield tmp_path / 'logs'


def test_ids_are_increasing_decimal_strings():
    gen = IdGenerator()
    assert [gen.next_id() for _ in range(3)] == ['1', '2', '3']


def test_complaint_ids_share_the_counter_and_carry_prefix():
    gen = IdGenerator()
    assert gen.next_id() == '1'
    assert gen.complaint_id() == 'C2'
    assert gen.next_id() == '3'


def test_concurrent_ids_have_no_duplicates_or_gaps():
    gen = IdGenerator()
    with ThreadPoolExecutor(max_workers=16) as pool:
        got = list(pool.map(lambda _: gen.next_id(), range(500)))
    assert sorted(int(x) for x in got) == list(range(1, 501))


def test_secret_code_is_sixteen_uppercase_hex_chars():
    code = IdGenerator().next_secret_code()
    assert re.fullmatch(r'[0-9A-F]{16}', code)


def test_secret_codes_differ():
    gen = IdGenerator()
    codes = {gen.next_secret_code() for _ in range(200)}
    assert len(codes) == 200


def test_secret_code_falls_back_when_entropy_unavailable(monkeypatch, log_dir, read_events):
    def broken(n):
        raise NotImplementedError("no entropy source")
    monkeypatch.setattr(ids.os, 'urandom', broken)
    code = IdGenerator().next_secret_code()
    assert code.startswith('SC')
    assert code[2:].isdigit()
    events = read_events(log_dir, 'secret_code_fallback')
    assert len(events) == 1
    assert 'no entropy source' in events[0]['error']

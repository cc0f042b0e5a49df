import json
import subprocess
import sys
from datetime import UTC, datetime
from pathlib import Path

from cmsgraph.core.identity import content_digest, create_node_id, deterministic_id


def test_deterministic_id_is_stable_and_distinct():
    assert deterministic_id("XyZ123") == deterministic_id("XyZ123")
    assert deterministic_id("XyZ123") != deterministic_id("XyZ124")
    assert len(deterministic_id("XyZ123")) == 64


def test_deterministic_id_is_stable_across_processes():
    code = "from cmsgraph.core.identity import deterministic_id; print(deterministic_id('doc-1'))"
    out = subprocess.run(
        [sys.executable, "-c", code],
        capture_output=True,
        text=True,
        check=True,
        cwd=Path(__file__).resolve().parents[2],
    )
    assert out.stdout.strip() == deterministic_id("doc-1")


def test_create_node_id_namespaces_by_prefix():
    assert create_node_id("Prismic", "doc-1") == deterministic_id("Prismic doc-1")
    assert create_node_id("Prismic", "doc-1") != create_node_id("Prismic Blog", "doc-1")


def test_content_digest_equal_for_equal_payloads():
    a = {"title": "Hello", "body": [1, 2, {"x": None}]}
    b = {"title": "Hello", "body": [1, 2, {"x": None}]}
    assert content_digest(a) == content_digest(b)


def test_content_digest_changes_with_any_value():
    a = {"title": "Hello", "count": 1}
    assert content_digest(a) != content_digest({"title": "Hello", "count": 2})
    assert content_digest(a) != content_digest({"title": "Hello!", "count": 1})


def test_content_digest_is_sensitive_to_key_order():
    assert content_digest({"a": 1, "b": 2}) != content_digest({"b": 2, "a": 1})


def test_content_digest_handles_datetimes():
    ts = datetime(2024, 1, 2, 3, 4, 5, tzinfo=UTC)
    assert content_digest({"at": ts}) == content_digest({"at": ts.isoformat()})


def test_lone_surrogates_hash_deterministically():
    text = json.loads('"bad \\ud800 text"')

    assert content_digest({"title": text}) == content_digest({"title": text})
    assert content_digest({"title": text}) != content_digest({"title": "bad  text"})
    assert deterministic_id(text) == deterministic_id(text)

import csv
import json
import os

import pytest

from artifacts.logger import RunLogger
from artifacts.report_writer import write_csv_and_summary
from domain.errors import ManifestError
from domain.models import CopyResult
from eservice_io.hash_stream import blake3_file, blake3_stream
from services.executor_service import ExecutorService
from services.manifest_service import load_manifest


def test_load_manifest_json_list(tmp_path):
    m = tmp_path / "jobs.json"
    m.write_text(json.dumps([
        {"source": "a.bin", "dest": "out/a.bin"},
        {"id": "second", "source": "/abs/b", "dest": "b", "digest": "ab"},
    ]))

    jobs = load_manifest(str(m))

    assert jobs[0].job_id == "job-1"
    assert jobs[0].source_path == os.path.join(str(tmp_path), "a.bin")
    assert jobs[0].dest_path == os.path.join(str(tmp_path), "out/a.bin")
    assert jobs[1].job_id == "second"
    assert jobs[1].source_path == "/abs/b"
    assert jobs[1].expected_digest == "ab"


def test_load_manifest_yaml_mapping(tmp_path):
    m = tmp_path / "jobs.yaml"
    m.write_text("jobs:\n  - source: x\n    dest: y\n")
    [job] = load_manifest(str(m))
    assert job.dest_path == os.path.join(str(tmp_path), "y")
    assert job.expected_digest is None


@pytest.mark.parametrize("content", [
    "{}",
    "[1, 2]",
    '[{"source": "a"}]',
    '[{"id": "x", "source": "a", "dest": "b"}, {"id": "x", "source": "c", "dest": "d"}]',
    "not json",
])
def test_load_manifest_rejects_bad_content(tmp_path, content):
    m = tmp_path / "jobs.json"
    m.write_text(content)
    with pytest.raises(ManifestError):
        load_manifest(str(m))


def test_load_manifest_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_manifest(str(tmp_path / "nope.json"))


def test_blake3_file_matches_stream(tmp_path):
    p = tmp_path / "f"
    p.write_bytes(b"hello world")
    with open(p, "rb") as f:
        assert blake3_file(str(p), chunk_bytes=3) == blake3_stream(f)
    assert len(blake3_file(str(p))) == 64


def test_run_logger_appends(tmp_path):
    path = tmp_path / "logs" / "run.log"
    logger = RunLogger(str(path))
    logger.log("first")
    logger.log("second")
    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert lines[0].endswith(" first")
    assert lines[1].endswith(" second")


def test_write_csv_and_summary(tmp_path):
    results = [
        CopyResult("a", "/s/a", "/d/a", "COPIED", bytes_copied=10, attempts=1),
        CopyResult("b", "/s/b", "/d/b", "FAILED", attempts=3,
                   error_code="COPY_FAIL", error_message="FileNotFoundError: x"),
    ]
    csv_path = tmp_path / "r" / "report.csv"
    summary_path = tmp_path / "r" / "summary.txt"

    counts = write_csv_and_summary(results, str(csv_path), str(summary_path), run_name="demo")

    assert counts == {"COPIED": 1, "FAILED": 1}
    with open(csv_path, newline="", encoding="utf-8") as f:
        rows = list(csv.reader(f))
    assert rows[0][:2] == ["job_id", "status"]
    assert rows[2][6] == "COPY_FAIL"
    summary = summary_path.read_text(encoding="utf-8")
    assert "Run: demo" in summary
    assert "- Total bytes copied: 10" in summary
    assert "- Failed: 1" in summary


def test_load_manifest_normalizes_digest(tmp_path):
    m = tmp_path / "jobs.yaml"
    m.write_text("- source: a\n  dest: b\n  digest: ABCDEF\n- source: c\n  dest: d\n  digest: 1234\n")
    jobs = load_manifest(str(m))
    assert jobs[0].expected_digest == "abcdef"
    assert jobs[1].expected_digest == "1234"


def test_uppercase_manifest_digest_verifies(tmp_path):
    src = tmp_path / "a"
    src.write_bytes(b"content")
    m = tmp_path / "jobs.json"
    m.write_text(json.dumps([{"source": "a", "dest": "b", "digest": blake3_file(str(src)).upper()}]))

    [result] = ExecutorService().execute(load_manifest(str(m)))

    assert result.status == "VERIFIED"

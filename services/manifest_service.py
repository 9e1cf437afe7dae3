import json
import os
from pathlib import Path

import yaml

from domain.errors import ManifestError
from domain.models import CopyJob
from eservice_io.path_utils import norm_abs_path


def _normalize_digest(value):
    if value is None:
        return None
    return str(value).strip().lower()


def _read_document(p: Path):
    text = p.read_text(encoding="utf-8")
    try:
        if p.suffix.lower() in (".yaml", ".yml"):
            return yaml.safe_load(text)
        return json.loads(text)
    except (yaml.YAMLError, json.JSONDecodeError) as e:
        raise ManifestError(f"Cannot parse manifest {p}: {e}") from e


def load_manifest(path: str) -> list[CopyJob]:
    """Load copy jobs from a JSON or YAML manifest.

    Accepted shapes: a list of job mappings, or a mapping with a ``jobs`` list.
    Each job needs ``source`` and ``dest``; ``id`` and ``digest`` are optional.
    Relative paths are taken relative to the manifest's own directory.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Manifest not found: {path}")

    doc = _read_document(p)
    if isinstance(doc, dict):
        doc = doc.get("jobs")
    if not isinstance(doc, list):
        raise ManifestError(f"Manifest {path} must contain a list of jobs")

    base = p.parent
    jobs = []
    for n, entry in enumerate(doc, start=1):
        if not isinstance(entry, dict):
            raise ManifestError(f"Job #{n} is not a mapping")
        source = entry.get("source")
        dest = entry.get("dest")
        if not source or not dest:
            raise ManifestError(f"Job #{n} needs both 'source' and 'dest'")

        jobs.append(CopyJob(
            job_id=str(entry.get("id") or f"job-{n}"),
            source_path=norm_abs_path(os.path.join(base, str(source))),
            dest_path=norm_abs_path(os.path.join(base, str(dest))),
            expected_digest=_normalize_digest(entry.get("digest")),
        ))

    ids = [j.job_id for j in jobs]
    if len(ids) != len(set(ids)):
        raise ManifestError(f"Manifest {path} has duplicate job ids")
    return jobs

import csv
from collections import Counter

from domain.constants import JOB_STATUS_FAILED
from eservice_io.path_utils import ensure_parent


def write_csv_and_summary(results, csv_path: str, summary_path: str, run_name: str | None = None) -> dict:
    counts = Counter(r.status for r in results)

    ensure_parent(csv_path)
    with open(csv_path, "w", newline="", encoding="utf-8") as f:
        w = csv.writer(f)
        w.writerow([
            "job_id", "status", "bytes_copied", "attempts",
            "source_path", "dest_path", "error_code", "error_message",
        ])
        for r in results:
            w.writerow([
                r.job_id, r.status, r.bytes_copied, r.attempts,
                r.source_path, r.dest_path, r.error_code or "", r.error_message or "",
            ])

    total_bytes = sum(r.bytes_copied for r in results)

    lines = []
    if run_name:
        lines.append(f"Run: {run_name}")
        lines.append("")
    lines.append("Summary")
    lines.append(f"- Total jobs: {len(results)}")
    lines.append(f"- Total bytes copied: {total_bytes}")
    lines.append(f"- Failed: {counts.get(JOB_STATUS_FAILED, 0)}")
    lines.append("")
    lines.append("Job status counts")
    for status, n in sorted(counts.items()):
        lines.append(f"- {status}: {n}")

    ensure_parent(summary_path)
    with open(summary_path, "w", encoding="utf-8") as f:
        f.write("\n".join(lines) + "\n")

    return dict(counts)

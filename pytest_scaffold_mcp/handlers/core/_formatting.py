"""Response formatting shared by the generation handlers."""

from __future__ import annotations

import json

from ...services import BatchResult


def format_batch_result(batch: BatchResult) -> str:
    """Format a batch as a one-line summary followed by the JSON details."""
    summary = batch.to_dict()
    counts = summary["summary"]
    lines = [
        f"Processed {counts['subjects']} subject(s): "
        f"{counts['created']} file(s) created, {counts['skipped']} skipped, "
        f"{counts['failed']} failed",
    ]

    for subject in batch.failed_subjects:
        lines.append(f"  - {subject.subject}: {subject.error.message}")

    lines.extend(["", json.dumps(summary, indent=2)])
    return "\n".join(lines)

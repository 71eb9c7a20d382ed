from typing import Dict, List, Sequence

from linkcheck.api.schemas import CheckOutput, LinkCheckResult, SummaryModel
from linkcheck.core.config import CheckOptions
from linkcheck.core.models import ResultEntry, Summary
from linkcheck.utils.url_utils import is_url


def format_duration(seconds: float) -> str:
    if seconds < 1:
        return f"{seconds * 1000:.1f}ms"
    return f"{seconds:.3f}s"


def build_output(entries: Sequence[ResultEntry], summary: Summary, duration: float) -> CheckOutput:
    return CheckOutput(
        summary=SummaryModel.from_summary(summary, format_duration(duration)),
        results=[LinkCheckResult.from_entry(entry) for entry in entries],
    )


def render_json(entries: Sequence[ResultEntry], summary: Summary, duration: float) -> str:
    return build_output(entries, summary, duration).model_dump_json(indent=2, exclude_none=True)


def render_text(entries: Sequence[ResultEntry], summary: Summary, duration: float) -> str:
    lines = ["Link Check Results", "==================", ""]

    groups: Dict[str, List[ResultEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.source, []).append(entry)

    for source, group in groups.items():
        if is_url(source):
            lines.append(f"🌐 Checking web page: {source}")
        else:
            lines.append(f"📄 Checking file: {source}")
        lines.append("-" * (len(source) + 20))
        for entry in group:
            status = entry.status
            lines.append(f"{'✓' if status.valid else '✗'} {status.link}")
            if entry.line:
                lines.append(f"  Line: {entry.line}")
            if status.status_code > 0:
                lines.append(f"  Status: {status.status_code}")
            if status.reason:
                lines.append(f"  Error: {status.reason}")
            lines.append("")
        lines.append("")

    lines.extend([
        "Summary:",
        f"  Total Links: {summary.total}",
        f"  Valid: {summary.valid}",
        f"  Invalid: {summary.invalid}",
        f"  Duration: {format_duration(duration)}",
    ])
    return "\n".join(lines)


def render_config(paths: Sequence[str], urls: Sequence[str], options: CheckOptions, recursive: bool,
                  only_dead: bool, output_format: str, ignore_patterns: Sequence[str]) -> str:
    lines = ["Link Checker Configuration:"]
    if paths:
        lines.append(f"  File Paths: {list(paths)}")
    if urls:
        lines.append(f"  URLs to Check: {list(urls)}")
    lines.append(f"  Recursive: {recursive}")
    lines.append(f"  Timeout: {format_duration(options.timeout)}")
    lines.append(f"  Only Dead Links: {only_dead}")
    lines.append(f"  Output Format: {output_format}")
    lines.append(f"  Workers: {options.workers}")
    if ignore_patterns:
        lines.append(f"  Ignore Patterns: {list(ignore_patterns)}")
    lines.append("")
    return "\n".join(lines)

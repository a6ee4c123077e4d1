"""User-facing output: per-batch results and the dry-run listing."""
import sys
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, TextIO

import yaml

from lokalise_keys.key_file_parser import KeyEntry
from lokalise_keys.payloads import DEFAULT_PLATFORMS, build_key_payload


@dataclass
class BatchResult:
    batch_number: int
    key_names: List[str]
    created_count: int = 0
    error: Optional[str] = None
    item_errors: List[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.error is None and not self.item_errors

    @classmethod
    def from_response(cls, batch_number: int, batch: Sequence[KeyEntry], response: Dict[str, Any]) -> "BatchResult":
        """
        Build a result from a 2xx "create keys" response.

        Lokalise reports keys it refused in an ``errors`` array while still
        answering 200, so those make the batch count as failed.
        """
        item_errors = []
        for item in response.get("errors") or []:
            message = item.get("message", "unknown error")
            key_name = item.get("key_name")
            if isinstance(key_name, dict):
                key_name = next(iter(key_name.values()), None)
            item_errors.append(f"{key_name}: {message}" if key_name else message)
        return cls(
            batch_number=batch_number,
            key_names=[entry.key for entry in batch],
            created_count=len(response.get("keys") or []),
            item_errors=item_errors,
        )

    @classmethod
    def from_error(cls, batch_number: int, batch: Sequence[KeyEntry], error: Exception) -> "BatchResult":
        return cls(batch_number=batch_number, key_names=[entry.key for entry in batch], error=str(error))


def report_results(
        results: Sequence[BatchResult],
        stream: Optional[TextIO] = None,
        total_batches: Optional[int] = None
) -> bool:
    """
    Print one line per batch followed by a summary.

    Args:
        results: Outcomes of the batches that were attempted, in order.
        stream: Where to print, stdout by default.
        total_batches: Number of batches planned; any beyond ``results`` were
            never sent and are reported as skipped.

    Returns:
        bool: True if every planned batch succeeded.
    """
    stream = stream or sys.stdout
    total = max(total_batches or 0, len(results))
    for result in results:
        label = f"Batch {result.batch_number}/{total}"
        keys = ", ".join(result.key_names)
        if result.succeeded:
            print(f"{label}: created {result.created_count} key(s) [{keys}]", file=stream)
            continue
        print(f"{label}: FAILED [{keys}]", file=stream)
        if result.error:
            print(f"  - {result.error}", file=stream)
        for item_error in result.item_errors:
            print(f"  - {item_error}", file=stream)

    failed = [result for result in results if not result.succeeded]
    created = sum(result.created_count for result in results)
    skipped = total - len(results)
    if skipped:
        print(f"{skipped} batch(es) not attempted.", file=stream)
    print(f"{created} key(s) created in {len(results) - len(failed)}/{total} successful batch(es).", file=stream)
    return not failed and not skipped


def format_dry_run(
        entries: Sequence[KeyEntry],
        language_iso: str = "<base language>",
        platforms: Sequence[str] = DEFAULT_PLATFORMS
) -> str:
    """Render the key objects that would be sent, as YAML."""
    payloads = [build_key_payload(entry, language_iso, platforms) for entry in entries]
    return yaml.safe_dump({"keys": payloads}, allow_unicode=True, sort_keys=False)

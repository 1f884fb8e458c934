"""
Structured reports and error types for migration runs.

The :mod:`content_migration.utils.errors` module centralizes the writing of
report entries for both failed and successful steps of a run.  Each entry is
appended to a JSON Lines file under ``reports/migration`` so that the
information can be reviewed or parsed after a run.

Two public functions are provided:

``report_error``
    Record a step that failed for a content store.  An optional exception can
    be supplied and will be serialized to the log.

``report_ok``
    Record a successful step for a content store.  Additional key/value
    information can be attached to the entry via the ``extra`` parameter.

The ``EVENTS`` dictionary maps event codes to human readable messages.  Codes
not present in the dictionary fall back to the code itself.
"""

from __future__ import annotations

import json
import os
from typing import Any, Dict, Optional

from .logging import get_logger

logger = get_logger(__name__)

EVENTS: Dict[str, str] = {
    "INPUT_MISSING": "Input tree file not found",
    "INPUT_MALFORMED": "Input tree file is not a JSON object",
    "EMPTY_HIERARCHY": "Reconciliation produced no sections",
    "HIERARCHY_WRITTEN": "Hierarchy written successfully",
}

REPORT_DIR = os.path.join("reports", "migration")


class InputTreeError(ValueError):
    """Raised when an input tree cannot be loaded as a JSON object."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


def _write_jsonl(path: str, data: Dict[str, Any]) -> None:
    """Append ``data`` as a JSON object followed by a newline to ``path``."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "a", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False)
        f.write("\n")


def report_error(
    code: str,
    store: str,
    exc: Optional[Exception] = None,
    *,
    report_dir: str = REPORT_DIR,
) -> Dict[str, Any]:
    """Log an error event for ``store``.

    Parameters
    ----------
    code:
        A key identifying the type of error.  If ``code`` is present in
        :data:`EVENTS` its value will be used as the message.
    store:
        The content path of the store being migrated.
    exc:
        Optional exception instance that triggered the error.  The string
        representation of the exception will be included in the entry.
    report_dir:
        Directory holding ``errors.jsonl``.

    Returns
    -------
    dict
        The entry that was written.
    """
    message = EVENTS.get(code, code)
    entry: Dict[str, Any] = {"code": code, "message": message, "store": store}
    if exc is not None:
        entry["error"] = str(exc)
    logger.error("%s - %s", message, store)
    _write_jsonl(os.path.join(report_dir, "errors.jsonl"), entry)
    return entry


def report_ok(
    code: str,
    store: str,
    extra: Optional[Dict[str, Any]] = None,
    *,
    report_dir: str = REPORT_DIR,
) -> Dict[str, Any]:
    """Log a successful event for ``store``.

    Parameters
    ----------
    code:
        A key identifying the type of event.
    store:
        The content path of the store being migrated.
    extra:
        Optional dictionary of additional fields to merge into the entry.
    report_dir:
        Directory holding ``success.jsonl``.
    """
    message = EVENTS.get(code, code)
    entry: Dict[str, Any] = {"code": code, "message": message, "store": store}
    if extra:
        entry.update(extra)
    logger.info("%s - %s", message, store)
    _write_jsonl(os.path.join(report_dir, "success.jsonl"), entry)
    return entry

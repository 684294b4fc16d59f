from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional


logger = logging.getLogger(__name__)

LINKEDIN_PROFILE_SYNCED = "linkedin_profile_synced"


def _ensure_parent_dir(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


class JsonlEventSink:
    """Appends one JSON line per tracked event.

    The file path comes from settings (SYNC_EVENT_LOG_PATH) unless given.
    A write failure is logged and never interrupts the sync.
    """

    def __init__(self, path: Optional[str] = None) -> None:
        if path is None:
            from config.settings import get_settings
            path = get_settings().sync_event_log_path
        self.path = Path(path)

    def track(self, event: str, member_id: str, properties: Dict[str, Any]) -> None:
        payload: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "event": event,
            "member_id": member_id,
            "properties": properties or {},
        }
        # Include run metadata if present
        run_id = os.getenv("RUN_ID")
        if run_id:
            payload["run_id"] = run_id

        try:
            _ensure_parent_dir(self.path)
            with self.path.open("a", encoding="utf-8") as f:
                f.write(json.dumps(payload, ensure_ascii=False) + "\n")
        except OSError as exc:
            logger.warning(
                "Could not write sync event",
                extra={"member_id": member_id, "status": "event_dropped", "error": str(exc)},
            )

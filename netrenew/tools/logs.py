from __future__ import annotations
import logging
from datetime import datetime, timezone
from pathlib import Path
from ..config import Settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

def setup_logging(level: str = "info") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)

def log_event(settings: Settings, message: str) -> Path:
    """Appends one timestamped line to <log_dir>/netrenew.log and returns its path."""
    log_dir = Path(settings.general.log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    path = log_dir / "netrenew.log"
    ts = datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")
    # multi-line reports are folded onto one line
    flat = " | ".join(line for line in message.splitlines() if line.strip())
    with path.open("a", encoding="utf-8") as f:
        f.write(f"{ts} | {flat}\n")
    return path

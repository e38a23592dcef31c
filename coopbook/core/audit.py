from pathlib import Path
from datetime import datetime
from typing import Optional

from coopbook.core.config import LOGS_DIR


def write_audit_log(actor: str, action: str, details: str = "", logs_dir: Optional[Path] = None):
    target_dir = logs_dir or LOGS_DIR
    target_dir.mkdir(parents=True, exist_ok=True)
    month_str = datetime.now().strftime("%Y_%m")
    log_file = target_dir / f"audit_{month_str}.log"
    ts = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    with open(log_file, "a", encoding="utf-8") as f:
        f.write(f"{ts} | {actor} | {action} | {details}\n")

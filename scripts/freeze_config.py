from __future__ import annotations

import argparse
from pathlib import Path

from goldsim.config import compute_config_hash, freeze_config, load_config, verify_config_lock


def main() -> None:
    parser = argparse.ArgumentParser(description="Pin a backtest config to its content hash.")
    parser.add_argument("config")
    parser.add_argument("--lock", help="Lock file path (defaults to <config>.lock.json)")
    parser.add_argument("--check", action="store_true", help="Only verify an existing lock")
    args = parser.parse_args()

    path = Path(args.config)
    if args.check:
        ok = verify_config_lock(path, args.lock)
        print(f"{path}: {'lock matches' if ok else 'lock missing or stale'}")
        raise SystemExit(0 if ok else 1)

    try:
        load_config(path)
    except ValueError as exc:
        raise SystemExit(f"Refusing to freeze invalid config {path}: {exc}") from exc
    lock_path = freeze_config(path, args.lock)
    print(f"Frozen {path} -> {lock_path} (sha256 {compute_config_hash(path)[:12]})")


if __name__ == "__main__":
    main()

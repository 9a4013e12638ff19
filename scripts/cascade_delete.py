from __future__ import annotations

import argparse
import importlib
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.payroll_admin.payroll_admin.container import build_container
from src.payroll_admin.payroll_admin.core.enums import Role
from src.payroll_admin.payroll_admin.core.exceptions import DeleteFailed
from src.payroll_admin.payroll_admin.logging_setup import configure_logging


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Xoá một bản ghi cùng mọi bản ghi phụ thuộc.")
    parser.add_argument("table")
    parser.add_argument("record_id")
    parser.add_argument("--dry-run", action="store_true", help="chỉ in các bảng phụ thuộc, không xoá")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))
    container = build_container(settings)

    if args.dry_run:
        print(json.dumps(container.cascade_service.describe(table=args.table), indent=2, ensure_ascii=False))
        return 0

    try:
        result = container.cascade_service.delete_record(
            current_role=Role.ADMIN,
            table=args.table,
            record_id=args.record_id,
        )
    except DeleteFailed as e:
        print(f"FAILED: {e} ({e.__cause__})", file=sys.stderr)
        if e.result is not None:
            print(json.dumps(e.result.to_dict(), indent=2, ensure_ascii=False), file=sys.stderr)
        return 1

    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

from __future__ import annotations

import argparse
import json
import os
import sys

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(SCRIPT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


def load_env_file(env_path: str) -> None:
    if not os.path.exists(env_path):
        return
    with open(env_path, "r", encoding="utf-8") as env_file:
        for line in env_file:
            line = line.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            os.environ.setdefault(key, value)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Reload the employee directory from the HR platform and print a department summary."
    )
    parser.add_argument(
        "--env-file",
        default=os.path.join(PROJECT_ROOT, ".env"),
        help="Path to .env file.",
    )
    parser.add_argument(
        "--include-past-employees",
        action="store_true",
        help="Count departed employees in department headcounts.",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    load_env_file(os.path.abspath(args.env_file))

    from src.api.dependencies import get_employee_directory_service
    from src.core.errors import AppError
    from src.core.logging import configure_logging

    configure_logging()
    service = get_employee_directory_service()
    try:
        status = service.refresh()
        departments = service.list_departments(include_past_employees=args.include_past_employees)
    except AppError as exc:
        print(f"Directory refresh failed: {exc.message}", file=sys.stderr)
        sys.exit(1)

    output = {
        "status": status.model_dump(by_alias=True),
        "departments": [department.model_dump(by_alias=True) for department in departments],
    }
    print(json.dumps(output, indent=2, default=str))


if __name__ == "__main__":
    main()

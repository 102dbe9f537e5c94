from __future__ import annotations

import argparse
import json
import os
import sys

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(SCRIPT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Price a firing worksheet from a JSON file.")
    parser.add_argument(
        "worksheet",
        help="Path to a JSON file with an 'items' list (firingType, height, width, length, quantity).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    from src.analytics.firing_cost import quote_worksheet
    from src.core.errors import AppError
    from src.schemas.firing_worksheet import FiringWorksheetRequest

    with open(args.worksheet, "r", encoding="utf-8") as worksheet_file:
        payload = json.load(worksheet_file)
    request = FiringWorksheetRequest.model_validate(payload)
    try:
        quote = quote_worksheet(request.items)
    except AppError as exc:
        print(exc.message, file=sys.stderr)
        sys.exit(1)

    for line in quote.line_items:
        print(
            f"{line.firing_type:<18} {line.height:>4} x {line.width:>4} x {line.length:>4} "
            f"= {line.volume:>7} in3  x{line.quantity:<3} @ {line.formatted_unit_cost:>6}  {line.formatted_price:>12}"
        )
    print(f"{'Total Price:':>62} {quote.formatted_total_price:>12}")


if __name__ == "__main__":
    main()

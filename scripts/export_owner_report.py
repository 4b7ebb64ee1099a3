from __future__ import annotations

import argparse
import json
import os
import sys
from datetime import datetime

SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_ROOT = os.path.abspath(os.path.join(SCRIPT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

REPORTS = (
    "executive-kpis",
    "historical-data",
    "pipeline-data",
    "funnel-data",
    "payment-analysis",
    "resource-utilisation",
    "cancellation-reasons",
    "forecast",
    "summary",
    "dashboard-stats",
)


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
    parser = argparse.ArgumentParser(description="Print one report for a hall owner as JSON.")
    parser.add_argument("owner_id", help="Hall owner id whose records are reported on.")
    parser.add_argument("--report", default="executive-kpis", choices=REPORTS, help="Report to build.")
    parser.add_argument("--period", default="90d", help="Period token: 30d, 90d, 180d or 1y.")
    parser.add_argument("--months", type=int, default=6, help="Months for history and pipeline reports.")
    parser.add_argument("--periods", type=int, default=6, help="Forecast horizon in months.")
    parser.add_argument(
        "--as-of",
        default=None,
        help="ISO timestamp to report as of. Defaults to the current local time.",
    )
    parser.add_argument(
        "--env-file",
        default=os.path.join(PROJECT_ROOT, ".env"),
        help="Path to .env file.",
    )
    return parser.parse_args()


def build_report(args: argparse.Namespace, now: datetime) -> object:
    from src.api.dependencies import get_dashboard_service, get_reports_service

    if args.report == "dashboard-stats":
        return get_dashboard_service().get_stats(args.owner_id, now)

    service = get_reports_service()
    handlers = {
        "executive-kpis": lambda: service.get_executive_kpis(args.owner_id, args.period, now),
        "historical-data": lambda: service.get_historical_data(args.owner_id, args.months, now),
        "pipeline-data": lambda: service.get_pipeline_data(args.owner_id, args.months, now),
        "funnel-data": lambda: service.get_funnel(args.owner_id, args.period, now),
        "payment-analysis": lambda: service.get_payment_analysis(args.owner_id, now),
        "resource-utilisation": lambda: service.get_resource_utilisation(args.owner_id),
        "cancellation-reasons": lambda: service.get_cancellation_reasons(args.owner_id, args.period, now),
        "forecast": lambda: service.get_forecast(args.owner_id, args.periods, now),
        "summary": lambda: service.get_summary(args.owner_id, args.period, now),
    }
    return handlers[args.report]()


def main() -> None:
    args = parse_args()
    load_env_file(os.path.abspath(args.env_file))

    from src.core.config import get_settings
    from src.core.logging import configure_logging

    configure_logging(get_settings().log_level)
    now = datetime.fromisoformat(args.as_of) if args.as_of else datetime.now()
    report = build_report(args, now)
    if isinstance(report, list):
        payload = [item.model_dump(by_alias=True, mode="json") for item in report]
    else:
        payload = report.model_dump(by_alias=True, mode="json")
    print(json.dumps(payload, indent=2))


if __name__ == "__main__":
    main()

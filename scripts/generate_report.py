import argparse
import asyncio
import sys

from lendme360.config import settings
from lendme360.exceptions import FeedbackAppError
from lendme360.services.openai_gateway import OpenAIGateway
from lendme360.services.report_service import ReportService
from lendme360.storage.seed import DIRECT_REPORTS_DATA
from lendme360.storage.models import DirectReport


async def generate(report_id: str) -> int:
    records = {rec["id"]: rec for rec in DIRECT_REPORTS_DATA}
    if report_id not in records:
        print(f"Error: no demo direct report with id '{report_id}'. Available: {', '.join(records)}")
        return 1

    direct_report = DirectReport.model_validate(records[report_id])
    print(f"Generating report for {direct_report.name} ({direct_report.role}) "
          f"from {len(direct_report.submissions)} submissions...")

    report_service = ReportService(OpenAIGateway(config=settings.openai))
    try:
        report = await report_service.generate_report(
            direct_report.name, direct_report.role, direct_report.submissions
        )
    except FeedbackAppError as e:
        print(f"Error: {e.message}")
        if e.debug:
            print(f"Debug: {e.debug}")
        return 1

    print()
    print(report)
    return 0


def main():
    """Prints the AI summary report for one of the demo direct reports."""
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument("report_id", nargs="?", default="1", help="Demo direct report id (default: 1)")
    args = parser.parse_args()

    sys.exit(asyncio.run(generate(args.report_id)))


if __name__ == "__main__":
    main()

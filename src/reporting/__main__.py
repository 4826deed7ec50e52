"""CLI entry point for reporting module."""

import argparse
import logging
import random
import sys
from datetime import date
from pathlib import Path

from rich.console import Console
from rich.table import Table

from src.analytics.provider import SampleMetricsProvider
from src.core.config import settings
from src.reporting.exceptions import ReportError
from src.reporting.models import DateRange, ReportRequest, ReportType, TimeFrame
from src.reporting.workflow import ReportOrchestrator


def _parse_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid date (expected YYYY-MM-DD): {value}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Generate SkyWay analytics reports',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Revenue report as CSV for the last week
  python -m src.reporting --type revenue --format csv --time-frame weekly

  # Feedback workbook with encrypted customer data
  python -m src.reporting --type feedback --format spreadsheet --customers

  # Bookings PDF for one destination
  python -m src.reporting --type bookings --format document --destination London
        """
    )

    parser.add_argument(
        '--type',
        default=ReportType.BOOKINGS.value,
        help='Report type: bookings, revenue, cancellations, routes, feedback (default: bookings)'
    )

    parser.add_argument(
        '--format',
        choices=['csv', 'spreadsheet', 'document', 'excel', 'pdf'],
        default='csv',
        help='Output format (default: csv)'
    )

    parser.add_argument(
        '--time-frame',
        choices=[t.value for t in TimeFrame],
        default=TimeFrame.MONTHLY.value,
        help='Time frame (default: monthly)'
    )

    parser.add_argument('--destination', default='all', help="Destination filter (default: all)")
    parser.add_argument('--status', default='all', help="Booking status filter (default: all)")
    parser.add_argument('--from', dest='from_date', type=_parse_date, help='Start of date range (YYYY-MM-DD)')
    parser.add_argument('--to', dest='to_date', type=_parse_date, help='End of date range (YYYY-MM-DD)')

    parser.add_argument(
        '--customers',
        action='store_true',
        help='Include the encrypted customer data section'
    )

    parser.add_argument('--seed', type=int, help='Seed for the sample data and occupancy estimates')

    parser.add_argument(
        '--output-dir',
        default=str(settings.output_dir),
        help=f'Output directory (default: {settings.output_dir})'
    )
    return parser


def main(argv=None):
    """Main CLI function."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=settings.log_level, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    console = Console()

    console.print("\n[bold blue]📊 SKYWAY REPORTING[/bold blue]\n")

    date_range = None
    if args.from_date and args.to_date:
        date_range = DateRange(from_date=args.from_date, to_date=args.to_date)
    elif args.from_date or args.to_date:
        console.print("[red]Error: --from and --to must be given together[/red]")
        sys.exit(2)

    request = ReportRequest(
        report_type=args.type,
        output_format=args.format,
        time_frame=args.time_frame,
        date_range=date_range,
        destination=args.destination,
        status=args.status,
        include_customer_data=args.customers,
    )

    rng = random.Random(args.seed) if args.seed is not None else None
    orchestrator = ReportOrchestrator(provider=SampleMetricsProvider(rng=rng), rng=rng)

    try:
        result = orchestrator.generate(request)
    except ReportError as e:
        console.print(f"[red]Report generation failed: {e}[/red]")
        sys.exit(1)

    output_dir = Path(args.output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    output_file = output_dir / result.filename
    output_file.write_bytes(result.file_bytes)

    table = Table(show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Report", result.model.title)
    table.add_row("Format", result.output_format.value)
    table.add_row("Media type", result.media_type)
    table.add_row("Size", f"{result.size:,} bytes")
    if result.encryption_path:
        table.add_row("Customer encryption", result.encryption_path.value)
    table.add_row("File", str(output_file))
    console.print(table)
    console.print("\n[bold green]✨ Report generation complete![/bold green]\n")


if __name__ == '__main__':
    main()

"""Console rendering of the transaction log and the final address table."""

from typing import Iterable, Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from deployer.core.constants import ZERO_ADDRESS
from deployer.core.models import DeploymentReport, TransactionRecord, pool_row


TRANSACTION_COLUMNS = [
    ("#", 4),
    ("Operation", 52),
    ("Hash", 68),
    ("Block", 10),
    ("Gas used", 12),
]


def _format_address(address: Optional[str]) -> Text:
    if not address:
        return Text("-", style="dim")
    if address == ZERO_ADDRESS:
        return Text(address, style="dim")
    return Text(address, style="cyan")


def _format_int(value: Optional[int]) -> Text:
    if value is None:
        return Text("-", style="dim")
    return Text(f"{value:,}")


def transactions_table(records: Iterable[TransactionRecord]) -> Table:
    """Build a table with one row per confirmed operation, in submission order."""
    table = Table(title="Transactions", row_styles=["", "dim"], show_lines=False)
    for name, width in TRANSACTION_COLUMNS:
        table.add_column(name, max_width=width, overflow="fold")

    for index, record in enumerate(records, start=1):
        table.add_row(
            str(index),
            record.label,
            Text(record.tx_hash, style="dim"),
            _format_int(record.block_number),
            _format_int(record.gas_used),
        )
    return table


def address_table(report: DeploymentReport) -> Table:
    """
    Build the final address table.

    Rows follow ``DeploymentReport.address_table``: registry, components,
    rewards token, then pools in document order.
    """
    stage_style = "bold green" if report.completed else "bold red"
    table = Table(
        title="Deployed contracts",
        caption=Text(f"Stage: {report.stage.value}", style=stage_style),
        row_styles=["", "dim"],
    )
    table.add_column("Name", min_width=20)
    table.add_column("Address", min_width=42)

    pool_rows = {pool_row(symbol) for symbol in report.pools}
    for name, address in report.address_table().items():
        label = Text(name, style="bold") if name in pool_rows else Text(name)
        table.add_row(label, _format_address(address))
    return table


def render_report(report: DeploymentReport, console: Optional[Console] = None, show_transactions: bool = True) -> None:
    console = console or Console()
    if show_transactions and report.transactions:
        console.print(transactions_table(report.transactions))
    console.print(address_table(report))

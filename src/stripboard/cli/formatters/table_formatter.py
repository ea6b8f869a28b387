"""Table output formatter for CLI."""

from typing import Any

from rich.table import Table

from stripboard.cli.formatters.base import OutputFormat, OutputFormatter, render_to_text


class TableFormatter(OutputFormatter[list[dict[str, Any]]]):
    """Formatter for tabular data output."""

    def format(
        self, data: list[dict[str, Any]], format_type: OutputFormat = OutputFormat.TABLE
    ) -> str:
        if not data:
            return "No data to display\n"
        if format_type == OutputFormat.MARKDOWN:
            return self._format_markdown(data)
        return render_to_text(self.build_table(data))

    def build_table(
        self, data: list[dict[str, Any]], title: str | None = None
    ) -> Table:
        """Build a rich table with one column per key of the first row."""
        columns = list(data[0].keys()) if data else []
        table = Table(title=title, show_header=True, header_style="bold magenta")
        for col in columns:
            table.add_column(col.replace("_", " ").title())
        for row in data:
            table.add_row(*[str(row.get(col, "")) for col in columns])
        return table

    def _format_markdown(self, data: list[dict[str, Any]]) -> str:
        columns = list(data[0].keys())
        lines = [
            "| " + " | ".join(columns) + " |",
            "| " + " | ".join(["---"] * len(columns)) + " |",
        ]
        for row in data:
            lines.append(
                "| " + " | ".join(str(row.get(col, "")) for col in columns) + " |"
            )
        return "\n".join(lines) + "\n"

    def create_summary_table(self, title: str, data: dict[str, Any]) -> Table:
        """Create a two-column table from key-value pairs."""
        table = Table(title=title, show_header=False)
        table.add_column("Property", style="cyan")
        table.add_column("Value", style="white")
        for key, value in data.items():
            table.add_row(key.replace("_", " ").title(), str(value))
        return table

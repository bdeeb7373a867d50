"""Rich table builders for the convert and infer commands."""

from __future__ import annotations

from rich.markup import escape
from rich.table import Table


def build_unknown_params_table(unknown_params) -> Table:
    """Build the table of parameters needing manual type review."""
    table = Table(show_header=True, title="Parameters with unknown type")
    table.add_column("Class", style="cyan")
    table.add_column("Function")
    table.add_column("Overload", justify="right")
    table.add_column("Section")
    table.add_column("Position", justify="right")
    table.add_column("Description")
    for param in unknown_params:
        table.add_row(
            param.class_name,
            param.function_name,
            str(param.overload),
            param.section.value,
            str(param.position),
            escape(param.token),
        )
    return table


def build_inference_table(rows) -> Table:
    """Build the (Description, Name, Type, Optional) table for `infer`, one row per token."""
    table = Table(show_header=True)
    table.add_column("Description", style="cyan")
    table.add_column("Name")
    table.add_column("Type")
    table.add_column("Optional")
    for token, spec in rows:
        type_text = f"[yellow]{escape(spec.type)}[/yellow]" if spec.is_unknown else escape(spec.type)
        table.add_row(
            escape(token),
            escape(spec.name or ""),
            type_text,
            "yes" if spec.is_optional else "",
        )
    return table

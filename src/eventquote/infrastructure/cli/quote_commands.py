"""CLI commands for pricing orders."""

from __future__ import annotations

import json
from decimal import Decimal, InvalidOperation
from pathlib import Path

import click

from eventquote.application.dto import OrderTotalsDTO
from eventquote.application.price_order import PriceOrderHandler
from eventquote.domain.exceptions import DomainException
from eventquote.infrastructure.bootstrap import default_service_fee, tax_rate_repository


def _parse_rate(ctx: click.Context, param: click.Parameter, value: str | None) -> Decimal | None:
    if value is None:
        return None
    try:
        return Decimal(value)
    except InvalidOperation:
        raise click.BadParameter(f"Invalid tax rate '{value}'. Expected e.g. 0.0875.")


@click.command("quote")
@click.argument("order_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--tax-rate", callback=_parse_rate, default=None, help="Tax rate as a fraction (e.g. 0.0875).")
@click.option("--location", default=None, help="Event location used to look up the tax rate.")
def quote(order_file: Path, tax_rate: Decimal | None, location: str | None) -> None:
    """Price the order described in ORDER_FILE (JSON)."""
    try:
        payload = json.loads(order_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise click.ClickException(f"{order_file} is not valid JSON: {exc}")

    try:
        handler = PriceOrderHandler(
            tax_rate_repo=tax_rate_repository(),
            default_service_fee=default_service_fee(),
        )
        dto = handler.handle(payload, tax_rate=tax_rate, location=location)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_totals(dto)


def _display_totals(dto: OrderTotalsDTO) -> None:
    """Shared formatting for displaying priced order totals."""
    for service in dto.services:
        click.echo(f"{service.service_name}")
        click.echo(f"  {'Item':<30} {'Qty':>5} {'Price':>10} {'Total':>12}")
        click.echo(f"  {'-'*60}")
        for line in service.lines:
            name = line.name
            if not line.included:
                name = f"  ({name})"
            elif line.unpriced:
                name = f"{name} [not in catalog]"
            click.echo(f"  {name:<30} {line.quantity:>5} {line.unit_price:>10} {line.total:>12}")
        click.echo(f"  {'-'*60}")
        click.echo(f"  {'Service Total':<47} {service.line_total:>12}")
        delivery = dto.deliveries.get(service.service_id)
        if delivery is not None:
            if delivery.eligible:
                click.echo(f"  Delivery ({delivery.range_label or 'free'}): {delivery.fee}")
            elif delivery.minimum_required:
                click.echo(
                    f"  Delivery unavailable: {delivery.reason} "
                    f"(minimum {delivery.minimum_required})"
                )
            else:
                click.echo(f"  Delivery unavailable: {delivery.reason}")
        click.echo()

    click.echo(f"{'Services Subtotal':<49} {dto.services_subtotal:>12}")
    for adj in dto.adjustments:
        label = adj.label if adj.taxable else f"{adj.label} (non-taxable)"
        click.echo(f"  {label:<47} {adj.amount:>12}")
    click.echo(f"{'Service Fee':<49} {dto.service_fee:>12}")
    click.echo(f"{'Delivery':<49} {dto.delivery_fees_total:>12}")
    click.echo(f"{'Tax (' + dto.tax_description + ')':<49} {dto.tax:>12}")
    click.echo("-" * 62)
    click.echo(f"{'Grand Total':<49} {dto.grand_total:>12}")

"""CLI commands for checking delivery tiers."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

import click

from eventquote.application.resolve_delivery import ResolveDeliveryHandler
from eventquote.domain.exceptions import DomainException


def _parse_ranges(raw: str) -> list[tuple[Decimal, str]]:
    """Parse '5:0,25:10,50:20' into (max_miles, fee) pairs."""
    ranges: list[tuple[Decimal, str]] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid range format '{pair}'. Expected 'MaxMiles:Fee'."
            )
        miles_str, fee = pair.split(":", 1)
        try:
            miles = Decimal(miles_str.strip())
        except InvalidOperation:
            raise click.BadParameter(f"Invalid distance '{miles_str}' in range '{pair}'.")
        ranges.append((miles, fee.strip()))
    return ranges


@click.command("delivery")
@click.option("--distance", required=True, help="Distance to the event in miles.")
@click.option("--ranges", "ranges_str", required=True, help="Tiers as 'MaxMiles:Fee,MaxMiles:Fee'.")
@click.option("--subtotal", default="0", show_default=True, help="Order subtotal for the minimum check.")
@click.option("--minimum", default=None, help="Vendor's delivery minimum.")
def delivery(distance: str, ranges_str: str, subtotal: str, minimum: str | None) -> None:
    """Find the delivery tier and fee for a distance."""
    try:
        miles = Decimal(distance)
    except InvalidOperation:
        raise click.BadParameter(f"Invalid distance '{distance}'.", param_hint="--distance")
    ranges = _parse_ranges(ranges_str)

    handler = ResolveDeliveryHandler()
    try:
        dto = handler.handle(miles, ranges, subtotal=subtotal, minimum=minimum)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if dto.eligible:
        click.echo(f"Eligible: {dto.range_label or 'free delivery'}, fee {dto.fee}")
    elif dto.minimum_required:
        click.echo(
            f"Not eligible: {dto.reason} (minimum {dto.minimum_required}; "
            f"within range: {'yes' if dto.distance_eligible else 'no'})"
        )
    else:
        click.echo(f"Not eligible: {dto.reason}")

"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers,
and the only place that reads the environment.
"""

from __future__ import annotations

import os
from pathlib import Path

from eventquote.domain.exceptions import ValidationError
from eventquote.domain.model.order import ServiceFeeConfig, ServiceFeeType
from eventquote.domain.model.value_objects import Money, to_decimal
from eventquote.infrastructure.persistence.json_tax_rate_repository import (
    JsonTaxRateRepository,
)

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DEFAULT_DATA_DIR = Path(__file__).resolve().parents[3] / "data"


def data_dir() -> Path:
    return Path(os.environ.get("EVENTQUOTE_DATA_DIR", _DEFAULT_DATA_DIR))


def tax_rate_repository() -> JsonTaxRateRepository:
    return JsonTaxRateRepository(data_dir() / "tax_rates.json")


def default_service_fee() -> ServiceFeeConfig:
    """Platform service fee; 5 % of the services subtotal unless configured."""
    fee_type = os.environ.get("EVENTQUOTE_SERVICE_FEE_TYPE", "percentage")
    try:
        parsed_type = ServiceFeeType(fee_type.lower())
    except ValueError as exc:
        raise ValidationError(f"Unknown service fee type '{fee_type}'") from exc
    return ServiceFeeConfig(
        fee_type=parsed_type,
        percentage=to_decimal(os.environ.get("EVENTQUOTE_SERVICE_FEE_PERCENTAGE", "5")),
        fixed=Money.of(os.environ.get("EVENTQUOTE_SERVICE_FEE_FIXED", "0")),
    )

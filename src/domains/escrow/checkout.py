"""Payment-session line items for escrow funding.

The fee triple is embedded as three separate line items so the client sees
the principal, the platform fee and the processing fee individually.
"""

from typing import Any

from .models import FeeBreakdown, to_minor_units


def _format_pct(pct: float) -> str:
    return f"{pct:g}%"


def build_checkout_line_items(
    breakdown: FeeBreakdown,
    currency: str,
    contract_title: str | None = None,
    contract_number: str | None = None,
) -> list[dict[str, Any]]:
    currency = currency.lower()
    title = contract_title or "Untitled contract"
    description = (
        f"Escrow funding for contract {contract_number}"
        if contract_number
        else "Escrow funding"
    )

    return [
        {
            "price_data": {
                "currency": currency,
                "product_data": {"name": f"Contract: {title}", "description": description},
                "unit_amount": to_minor_units(breakdown.contract_amount),
            },
            "quantity": 1,
        },
        {
            "price_data": {
                "currency": currency,
                "product_data": {
                    "name": "Platform Fee",
                    "description": (
                        f"Platform fee ({_format_pct(breakdown.platform_fee_percentage)})"
                    ),
                },
                "unit_amount": to_minor_units(breakdown.platform_fee),
            },
            "quantity": 1,
        },
        {
            "price_data": {
                "currency": currency,
                "product_data": {
                    "name": "Processing Fee",
                    "description": "Payment processing fee",
                },
                "unit_amount": to_minor_units(breakdown.processor_fee),
            },
            "quantity": 1,
        },
    ]


def build_checkout_metadata(
    breakdown: FeeBreakdown,
    contract_id: str | None = None,
    user_id: str | None = None,
) -> dict[str, str]:
    """Payment-session metadata. Processors only accept string values."""
    metadata = {
        "contract_amount": repr(breakdown.contract_amount),
        "platform_fee": repr(breakdown.platform_fee),
        "stripe_fee": repr(breakdown.processor_fee),
        "total_charge": repr(breakdown.total_charge),
        "subscription_tier": breakdown.subscription_tier.value,
        "type": "escrow_funding",
    }
    if contract_id:
        metadata["contract_id"] = contract_id
    if user_id:
        metadata["user_id"] = user_id
    return metadata

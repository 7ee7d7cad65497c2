"""
Naija Tax Calculator - VAT Calculator

Value Added Tax calculation for the Nigeria Tax Act 2026.

Nigeria VAT Rate (2026): 7.5%

Key Features:
- Exclusive pricing (add VAT on top of a net price)
- Inclusive pricing (extract VAT from a gross price)
- Business net position (output VAT - input VAT: payable or refundable)
- Multi-item invoices with per-item VAT exemption
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Sequence, Tuple, Union

from app.services.tax_calculators.rates import NIGERIA_2026_RATES, TaxRates
from app.utils.formatters import format_naira


logger = logging.getLogger(__name__)


class VATCalculationType(str, Enum):
    """Whether the supplied amount already includes VAT."""
    INCLUSIVE = "inclusive"
    EXCLUSIVE = "exclusive"


@dataclass(frozen=True)
class VATResult:
    """Result of a simple VAT calculation."""
    original_amount: float
    vat_rate: float
    net_amount: float
    vat_amount: float
    gross_amount: float
    calculation_type: VATCalculationType

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original_amount": self.original_amount,
            "vat_rate": self.vat_rate,
            "net_amount": self.net_amount,
            "vat_amount": self.vat_amount,
            "gross_amount": self.gross_amount,
            "calculation_type": self.calculation_type.value,
        }


@dataclass(frozen=True)
class VATBusinessResult:
    """Net VAT position of a business for a period."""
    output_vat: float
    input_vat: float
    net_vat: float
    is_payable: bool
    is_refundable: bool
    explanation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "output_vat": self.output_vat,
            "input_vat": self.input_vat,
            "net_vat": self.net_vat,
            "is_payable": self.is_payable,
            "is_refundable": self.is_refundable,
            "explanation": self.explanation,
        }


@dataclass(frozen=True)
class VATLineItem:
    """Invoice line for multi-item VAT."""
    description: str
    amount: float
    is_vat_exempt: bool = False


@dataclass(frozen=True)
class VATLineResult:
    description: str
    amount: float
    vat_amount: float
    total_with_vat: float
    is_exempt: bool


@dataclass(frozen=True)
class VATMultiItemResult:
    items: Tuple[VATLineResult, ...]
    total_net: float
    total_vat: float
    grand_total: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [
                {
                    "description": item.description,
                    "amount": item.amount,
                    "vat_amount": item.vat_amount,
                    "total_with_vat": item.total_with_vat,
                    "is_exempt": item.is_exempt,
                }
                for item in self.items
            ],
            "total_net": self.total_net,
            "total_vat": self.total_vat,
            "grand_total": self.grand_total,
        }


class VATCalculator:
    """
    VAT calculation utilities.

    Amounts are returned unrounded; display code rounds for presentation.
    """

    def __init__(self, rates: TaxRates = NIGERIA_2026_RATES):
        self.rates = rates

    def calculate_simple(
        self,
        amount: float,
        mode: Union[VATCalculationType, str] = VATCalculationType.EXCLUSIVE,
    ) -> VATResult:
        """
        Calculate VAT from an amount.

        Args:
            amount: Net amount (exclusive) or gross amount (inclusive)
            mode: exclusive adds VAT on top; inclusive extracts it

        Returns:
            VATResult with net, VAT and gross amounts
        """
        vat_rate = self.rates.vat_rate
        multiplier = vat_rate / 100

        if mode == VATCalculationType.INCLUSIVE:
            gross_amount = amount
            net_amount = gross_amount / (1 + multiplier)
            vat_amount = gross_amount - net_amount
            calculation_type = VATCalculationType.INCLUSIVE
        else:
            net_amount = amount
            vat_amount = net_amount * multiplier
            gross_amount = net_amount + vat_amount
            calculation_type = VATCalculationType.EXCLUSIVE

        return VATResult(
            original_amount=amount,
            vat_rate=vat_rate,
            net_amount=net_amount,
            vat_amount=vat_amount,
            gross_amount=gross_amount,
            calculation_type=calculation_type,
        )

    def calculate_business(self, output_vat: float, input_vat: float) -> VATBusinessResult:
        """
        Net VAT payable or refundable.

        Output VAT (collected on sales) - Input VAT (paid on purchases).
        """
        net_vat = output_vat - input_vat
        is_payable = net_vat > 0
        is_refundable = net_vat < 0

        if is_payable:
            explanation = (
                f"You collected {format_naira(output_vat, 0)} in VAT from customers and paid "
                f"{format_naira(input_vat, 0)} in VAT on purchases. "
                f"You owe {format_naira(abs(net_vat), 0)} to NRS."
            )
        elif is_refundable:
            explanation = (
                f"You collected {format_naira(output_vat, 0)} in VAT from customers but paid "
                f"{format_naira(input_vat, 0)} in VAT on purchases. "
                f"You are entitled to a refund of {format_naira(abs(net_vat), 0)} from NRS."
            )
        else:
            explanation = "Your output VAT equals your input VAT. No VAT payment or refund is due."

        logger.debug("Business VAT: output=%s input=%s net=%s", output_vat, input_vat, net_vat)

        return VATBusinessResult(
            output_vat=output_vat,
            input_vat=input_vat,
            net_vat=net_vat,
            is_payable=is_payable,
            is_refundable=is_refundable,
            explanation=explanation,
        )

    def calculate_multi_item(self, items: Sequence[VATLineItem]) -> VATMultiItemResult:
        """VAT for a list of invoice lines; exempt lines carry no VAT."""
        multiplier = self.rates.vat_rate / 100
        total_net = 0.0
        total_vat = 0.0
        lines = []

        for item in items:
            vat_amount = 0.0 if item.is_vat_exempt else item.amount * multiplier
            total_net += item.amount
            total_vat += vat_amount
            lines.append(VATLineResult(
                description=item.description,
                amount=item.amount,
                vat_amount=vat_amount,
                total_with_vat=item.amount + vat_amount,
                is_exempt=item.is_vat_exempt,
            ))

        return VATMultiItemResult(
            items=tuple(lines),
            total_net=total_net,
            total_vat=total_vat,
            grand_total=total_net + total_vat,
        )

    def quick_exclusive(self, amount: float) -> VATResult:
        return self.calculate_simple(amount, VATCalculationType.EXCLUSIVE)

    def quick_inclusive(self, amount: float) -> VATResult:
        return self.calculate_simple(amount, VATCalculationType.INCLUSIVE)

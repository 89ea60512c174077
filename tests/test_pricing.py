"""Tests for reservation fee derivation, quotation pricing and document status."""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from app.models.financial import DocumentStatus
from app.schemas.quotation import QuotationPricingInput
from app.services.financial_service import resolve_document_status
from app.services.quotation_service import calculate_quotation_price
from app.services.reservation_service import calculate_reservation_fees


def _property(**overrides) -> SimpleNamespace:
    """Create a property-like object with typical cost settings."""
    values = {
        "cleaning_cost": Decimal("40.00"),
        "check_in_fee": Decimal("20.00"),
        "commission": Decimal("10"),
        "team_payment": Decimal("25.00"),
    }
    values.update(overrides)
    return SimpleNamespace(**values)


class TestReservationFees:
    """Tests for calculate_reservation_fees."""

    def test_fees_and_net_amount(self) -> None:
        fees = calculate_reservation_fees(Decimal("500"), Decimal("75"), _property())
        assert fees == {
            "cleaning_fee": Decimal("40.00"),
            "check_in_fee": Decimal("20.00"),
            "commission_fee": Decimal("50.00"),
            "team_payment": Decimal("25.00"),
            "net_amount": Decimal("290.00"),
        }

    def test_commission_rounds_half_up(self) -> None:
        fees = calculate_reservation_fees(
            Decimal("123.45"), Decimal("0"), _property(commission=Decimal("15"))
        )
        # 123.45 * 0.15 = 18.5175
        assert fees["commission_fee"] == Decimal("18.52")

    def test_net_amount_can_be_negative(self) -> None:
        fees = calculate_reservation_fees(Decimal("50"), Decimal("0"), _property())
        assert fees["net_amount"] == Decimal("-40.00")

    def test_missing_commission_counts_as_zero(self) -> None:
        fees = calculate_reservation_fees(
            Decimal("100"), Decimal("0"), _property(commission=None)
        )
        assert fees["commission_fee"] == Decimal("0.00")


class TestQuotationPrice:
    """Tests for calculate_quotation_price."""

    def test_base_price_only(self) -> None:
        price = calculate_quotation_price(QuotationPricingInput(base_price=Decimal("80")))
        assert price.base_price == Decimal("80.00")
        assert price.additional_price == Decimal("0.00")
        assert price.total_price == Decimal("80.00")

    def test_all_surcharges(self) -> None:
        price = calculate_quotation_price(
            QuotationPricingInput(
                base_price=Decimal("100"),
                has_exterior_space=True,
                exterior_area=20,
                is_duplex=True,
                has_bbq=True,
                has_garden=True,
                has_glass_surfaces=True,
            )
        )
        assert price.additional_price == Decimal("40.00")
        assert price.total_price == Decimal("140.00")

    @pytest.mark.parametrize("area", [0, 10, 15])
    def test_small_exterior_has_no_surcharge(self, area: int) -> None:
        price = calculate_quotation_price(
            QuotationPricingInput(
                base_price=Decimal("100"), has_exterior_space=True, exterior_area=area
            )
        )
        assert price.additional_price == Decimal("0.00")

    def test_garden_needs_glass_surfaces(self) -> None:
        price = calculate_quotation_price(
            QuotationPricingInput(base_price=Decimal("100"), has_garden=True)
        )
        assert price.additional_price == Decimal("0.00")


class TestDocumentStatus:
    """Tests for resolve_document_status."""

    def test_fully_paid(self) -> None:
        status = resolve_document_status(
            DocumentStatus.PENDING, Decimal("100"), Decimal("100")
        )
        assert status == DocumentStatus.PAID

    def test_partially_paid(self) -> None:
        status = resolve_document_status(
            DocumentStatus.INVOICED, Decimal("100"), Decimal("30")
        )
        assert status == DocumentStatus.PARTIAL

    def test_unpaid_keeps_prior_status(self) -> None:
        status = resolve_document_status(
            DocumentStatus.INVOICED, Decimal("100"), Decimal("0")
        )
        assert status == DocumentStatus.INVOICED

    def test_payments_removed_reverts_to_pending(self) -> None:
        status = resolve_document_status(DocumentStatus.PAID, Decimal("100"), Decimal("0"))
        assert status == DocumentStatus.PENDING

    def test_payments_removed_reverts_to_invoiced(self) -> None:
        status = resolve_document_status(
            DocumentStatus.PARTIAL, Decimal("100"), Decimal("0"), invoiced=True
        )
        assert status == DocumentStatus.INVOICED

    def test_cancelled_is_sticky(self) -> None:
        status = resolve_document_status(
            DocumentStatus.CANCELLED, Decimal("100"), Decimal("100")
        )
        assert status == DocumentStatus.CANCELLED

    def test_zero_total_is_not_paid(self) -> None:
        status = resolve_document_status(DocumentStatus.PENDING, Decimal("0"), Decimal("0"))
        assert status == DocumentStatus.PENDING

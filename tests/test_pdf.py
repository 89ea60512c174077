"""Tests for the fpdf2 renderers."""

from datetime import date, datetime
from decimal import Decimal

from app.models.quotation import Quotation, QuotationStatus
from app.schemas.statistics import (
    OwnerPropertyReport,
    OwnerReport,
    OwnerReportTotals,
    ReservationSummary,
)
from app.services.pdf_service import (
    format_money,
    render_owner_report_pdf,
    render_quotation_pdf,
    save_pdf,
)


def make_quotation() -> Quotation:
    return Quotation(
        id=7,
        client_name="Sofia Costa",
        client_email="sofia@example.com",
        status=QuotationStatus.DRAFT,
        property_type="Moradia",
        property_address="Rua das Flores 12, Porto",
        total_area=180,
        bedrooms=3,
        bathrooms=2,
        has_exterior_space=True,
        exterior_area=40,
        is_duplex=True,
        has_bbq=False,
        has_garden=True,
        has_glass_surfaces=True,
        base_price=Decimal("120.00"),
        additional_price=Decimal("30.00"),
        total_price=Decimal("150.00"),
        valid_until=date(2030, 1, 31),
        notes="Limpeza após obras, incluir janelas",
        created_at=datetime(2030, 1, 1),
    )


def make_report() -> OwnerReport:
    reservation = ReservationSummary(
        id=1,
        guest_name="Emma Brown",
        check_in_date=date(2030, 6, 10),
        check_out_date=date(2030, 6, 14),
        total_amount=Decimal("480.00"),
        net_amount=Decimal("307.00"),
        platform="airbnb",
    )
    return OwnerReport(
        owner_id=3,
        owner_name="João Silva",
        month=6,
        year=2030,
        period_start=date(2030, 6, 1),
        period_end=date(2030, 6, 30),
        properties=[
            OwnerPropertyReport(
                property_id=1,
                property_name="Apartamento Sé",
                revenue=Decimal("480.00"),
                cleaning_costs=Decimal("40.00"),
                check_in_fees=Decimal("20.00"),
                commission=Decimal("48.00"),
                team_payments=Decimal("25.00"),
                net_profit=Decimal("307.00"),
                occupancy_rate=13.33,
                available_days=30,
                occupied_days=4,
                reservations=[reservation],
            )
        ],
        totals=OwnerReportTotals(
            total_revenue=Decimal("480.00"),
            total_cleaning_costs=Decimal("40.00"),
            total_check_in_fees=Decimal("20.00"),
            total_commission=Decimal("48.00"),
            total_team_payments=Decimal("25.00"),
            total_net_profit=Decimal("307.00"),
            average_occupancy=13.33,
            total_properties=1,
            total_reservations=1,
        ),
    )


class TestFormatMoney:
    """Tests for format_money."""

    def test_thousands_and_cents(self) -> None:
        assert format_money(Decimal("1234.5")) == "€ 1,234.50"

    def test_none_is_zero(self) -> None:
        assert format_money(None) == "€ 0.00"


class TestRenderers:
    """Tests for the PDF renderers."""

    def test_quotation_pdf(self) -> None:
        content = render_quotation_pdf(make_quotation())
        assert content.startswith(b"%PDF")

    def test_owner_report_pdf(self) -> None:
        content = render_owner_report_pdf(make_report())
        assert content.startswith(b"%PDF")

    def test_owner_report_without_properties(self) -> None:
        report = make_report()
        report.properties = []
        assert render_owner_report_pdf(report).startswith(b"%PDF")

    def test_save_pdf(self, tmp_path) -> None:
        path = save_pdf(b"%PDF-1.4 test", "report.pdf", str(tmp_path / "out"))
        assert (tmp_path / "out" / "report.pdf").read_bytes() == b"%PDF-1.4 test"
        assert path.endswith("report.pdf")

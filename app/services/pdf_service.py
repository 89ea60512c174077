"""
PDF rendering for quotations and owner monthly reports.

Renderers return the document as ``bytes``; ``save_pdf`` stores a copy under
``settings.UPLOAD_DIR``.
"""

import logging
import os
from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Sequence

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from app.core.config import settings
from app.models.quotation import Quotation
from app.schemas.statistics import OwnerReport

logger = logging.getLogger(__name__)

COMPANY_NAME = "Maria Faz"
PRIMARY_COLOR = (37, 99, 235)
LIGHT_FILL = (241, 245, 249)


def format_money(value) -> str:
    """``€ 1,234.56``"""
    amount = Decimal(str(value or 0))
    return f"€ {amount:,.2f}"


def _safe(text) -> str:
    # Core fonts only cover windows-1252
    return str(text if text is not None else "").encode("cp1252", "replace").decode(
        "cp1252"
    )


class BrandedPDF(FPDF):
    def __init__(self, title: str, subtitle: Optional[str] = None):
        super().__init__(orientation="P", unit="mm", format="A4")
        self.core_fonts_encoding = "windows-1252"
        self.doc_title = title
        self.doc_subtitle = subtitle
        self.set_auto_page_break(auto=True, margin=18)
        self.set_title(_safe(title))
        self.set_author(COMPANY_NAME)

    def header(self):
        self.set_fill_color(*PRIMARY_COLOR)
        self.rect(0, 0, self.w, 24, style="F")
        self.set_text_color(255, 255, 255)
        self.set_font("Helvetica", "B", 16)
        self.set_xy(10, 6)
        self.cell(0, 7, _safe(COMPANY_NAME), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_font("Helvetica", "", 10)
        self.cell(0, 6, _safe(self.doc_title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_text_color(0, 0, 0)
        self.set_y(30)

    def footer(self):
        self.set_y(-14)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(120, 120, 120)
        generated = datetime.now().strftime("%d/%m/%Y %H:%M")
        self.cell(0, 8, f"Gerado em {generated}", align="L")
        self.set_x(self.l_margin)
        self.cell(0, 8, f"Página {self.page_no()}/{{nb}}", align="R")
        self.set_text_color(0, 0, 0)

    def section_title(self, text: str):
        self.ln(3)
        self.set_font("Helvetica", "B", 12)
        self.set_text_color(*PRIMARY_COLOR)
        self.cell(0, 8, _safe(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_draw_color(*PRIMARY_COLOR)
        self.line(self.l_margin, self.get_y(), self.w - self.r_margin, self.get_y())
        self.set_text_color(0, 0, 0)
        self.ln(2)

    def key_value(self, label: str, value, label_width: float = 55):
        self.set_font("Helvetica", "B", 10)
        self.cell(label_width, 6, _safe(label))
        self.set_font("Helvetica", "", 10)
        self.cell(0, 6, _safe(value), new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def table(
        self,
        headers: Sequence[str],
        rows: Sequence[Sequence],
        widths: Sequence[float],
        aligns: Sequence[str],
        bold_last_row: bool = False,
    ):
        self.set_font("Helvetica", "B", 9)
        self.set_fill_color(*LIGHT_FILL)
        for header, width, align in zip(headers, widths, aligns):
            self.cell(width, 7, _safe(header), border=1, align=align, fill=True)
        self.ln()

        for index, row in enumerate(rows):
            is_total = bold_last_row and index == len(rows) - 1
            self.set_font("Helvetica", "B" if is_total else "", 9)
            for value, width, align in zip(row, widths, aligns):
                self.cell(width, 6, _safe(value), border=1, align=align)
            self.ln()

    def to_bytes(self) -> bytes:
        return bytes(self.output())


def render_quotation_pdf(quotation: Quotation) -> bytes:
    pdf = BrandedPDF(f"Orçamento nº {quotation.id}")
    pdf.alias_nb_pages()
    pdf.add_page()

    pdf.section_title("Cliente")
    pdf.key_value("Nome", quotation.client_name)
    if quotation.client_email:
        pdf.key_value("Email", quotation.client_email)
    if quotation.client_phone:
        pdf.key_value("Telefone", quotation.client_phone)

    pdf.section_title("Propriedade")
    pdf.key_value("Tipo", quotation.property_type)
    if quotation.property_address:
        pdf.key_value("Morada", quotation.property_address)
    pdf.key_value("Área total", f"{quotation.total_area} m²")
    pdf.key_value("Quartos / WC", f"{quotation.bedrooms} / {quotation.bathrooms}")

    features: List[str] = []
    if quotation.has_exterior_space:
        features.append(f"Espaço exterior ({quotation.exterior_area} m²)")
    if quotation.is_duplex:
        features.append("Duplex")
    if quotation.has_bbq:
        features.append("Churrasqueira")
    if quotation.has_garden:
        features.append("Jardim")
    if quotation.has_glass_surfaces:
        features.append("Superfícies de vidro")
    pdf.key_value("Características", ", ".join(features) or "-")

    pdf.section_title("Preço")
    pdf.table(
        ["Descrição", "Valor"],
        [
            ["Preço base", format_money(quotation.base_price)],
            ["Adicionais", format_money(quotation.additional_price)],
            ["Total", format_money(quotation.total_price)],
        ],
        widths=[130, 60],
        aligns=["L", "R"],
        bold_last_row=True,
    )

    pdf.ln(4)
    pdf.set_font("Helvetica", "", 10)
    pdf.cell(
        0,
        6,
        f"Válido até {quotation.valid_until.strftime('%d/%m/%Y')}",
        new_x=XPos.LMARGIN,
        new_y=YPos.NEXT,
    )
    if quotation.notes:
        pdf.section_title("Notas")
        pdf.set_font("Helvetica", "", 10)
        pdf.multi_cell(0, 5, _safe(quotation.notes))

    return pdf.to_bytes()


def render_owner_report_pdf(report: OwnerReport) -> bytes:
    period = f"{report.month:02d}/{report.year}"
    pdf = BrandedPDF(f"Relatório mensal {period}", report.owner_name)
    pdf.alias_nb_pages()
    pdf.add_page()

    pdf.section_title("Proprietário")
    pdf.key_value("Nome", report.owner_name)
    pdf.key_value(
        "Período",
        f"{report.period_start.strftime('%d/%m/%Y')} a "
        f"{report.period_end.strftime('%d/%m/%Y')}",
    )

    totals = report.totals
    pdf.section_title("Resumo")
    pdf.key_value("Receita total", format_money(totals.total_revenue))
    pdf.key_value("Limpezas", format_money(totals.total_cleaning_costs))
    pdf.key_value("Check-ins", format_money(totals.total_check_in_fees))
    pdf.key_value("Comissão", format_money(totals.total_commission))
    pdf.key_value("Equipas", format_money(totals.total_team_payments))
    pdf.key_value("Lucro líquido", format_money(totals.total_net_profit))
    pdf.key_value("Ocupação média", f"{totals.average_occupancy:.1f}%")
    pdf.key_value("Reservas", totals.total_reservations)

    for item in report.properties:
        pdf.section_title(item.property_name)
        pdf.key_value(
            "Ocupação",
            f"{item.occupancy_rate:.1f}% ({item.occupied_days}/{item.available_days} dias)",
        )
        rows = [
            [
                r.guest_name[:28],
                r.check_in_date.strftime("%d/%m"),
                r.check_out_date.strftime("%d/%m"),
                r.platform,
                format_money(r.total_amount),
                format_money(r.net_amount),
            ]
            for r in item.reservations
        ]
        rows.append(
            ["Total", "", "", "", format_money(item.revenue), format_money(item.net_profit)]
        )
        pdf.table(
            ["Hóspede", "Entrada", "Saída", "Plataforma", "Total", "Líquido"],
            rows,
            widths=[58, 20, 20, 28, 32, 32],
            aligns=["L", "C", "C", "L", "R", "R"],
            bold_last_row=True,
        )

    return pdf.to_bytes()


def owner_report_filename(owner_id: int, year: int, month: int) -> str:
    return f"relatorio_{owner_id}_{year}_{month:02d}.pdf"


def save_pdf(content: bytes, filename: str, directory: Optional[str] = None) -> str:
    """Write a rendered PDF to disk and return its path."""
    directory = directory or settings.UPLOAD_DIR
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, filename)
    with open(path, "wb") as f:
        f.write(content)
    logger.info(f"PDF saved to {path}")
    return path

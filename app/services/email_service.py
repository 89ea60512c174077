"""
Delivery of owner reports by email.

Messages go out over SMTP. Nothing is sent unless ``SMTP_HOST`` and
``EMAIL_FROM`` are configured.
"""

import logging
import smtplib
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.exceptions import ExternalServiceError, ValidationError
from app.core.service_utils import ensure_exists
from app.models.activity import ActivityType
from app.models.owner import Owner
from app.schemas.email import EmailStatus, ReportEmailResult
from app.schemas.statistics import OwnerReport
from app.services.activity_service import ActivityService
from app.services.pdf_service import (
    format_money,
    owner_report_filename,
    render_owner_report_pdf,
)
from app.services.statistics_service import StatisticsService

logger = logging.getLogger(__name__)

# (filename, content, MIME subtype)
Attachment = Tuple[str, bytes, str]


def build_message(
    sender: str,
    to: str,
    subject: str,
    html: str,
    attachments: Optional[List[Attachment]] = None,
) -> MIMEMultipart:
    msg = MIMEMultipart()
    msg["From"] = sender
    msg["To"] = to
    msg["Subject"] = subject
    msg.attach(MIMEText(html, "html", "utf-8"))

    for filename, content, subtype in attachments or []:
        part = MIMEApplication(content, _subtype=subtype)
        part.add_header("Content-Disposition", "attachment", filename=filename)
        msg.attach(part)
    return msg


def send_message(msg: MIMEMultipart) -> None:
    """Blocking SMTP delivery; run it in a worker thread."""
    with smtplib.SMTP(
        settings.SMTP_HOST, settings.SMTP_PORT, timeout=settings.SMTP_TIMEOUT
    ) as server:
        if settings.SMTP_USE_TLS:
            server.starttls()
        if settings.SMTP_USERNAME:
            server.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
        server.send_message(msg)


def report_email_body(report: OwnerReport) -> str:
    totals = report.totals
    return (
        f"<p>Caro(a) {report.owner_name},</p>"
        f"<p>Segue em anexo o relatório mensal das suas propriedades referente a "
        f"{report.month:02d}/{report.year}.</p>"
        f"<ul>"
        f"<li>Receita: {format_money(totals.total_revenue)}</li>"
        f"<li>Reservas: {totals.total_reservations}</li>"
        f"<li>Resultado líquido: {format_money(totals.total_net_profit)}</li>"
        f"</ul>"
        f"<p>Com os melhores cumprimentos,<br>Maria Faz</p>"
    )


class EmailService:
    def __init__(self, db: AsyncSession):
        self.db = db
        self.statistics = StatisticsService(db)
        self.activities = ActivityService(db)

    @property
    def is_configured(self) -> bool:
        return bool(settings.SMTP_HOST and settings.EMAIL_FROM)

    def status(self) -> EmailStatus:
        return EmailStatus(
            configured=self.is_configured,
            sender=settings.EMAIL_FROM or None,
        )

    async def send_owner_report(
        self, owner_id: int, month: int, year: int, to: Optional[str] = None
    ) -> ReportEmailResult:
        """
        Render an owner's monthly report and email it as a PDF attachment.

        Raises:
            EntityNotFoundError: If the owner does not exist
            ValidationError: If there is no recipient address
            ExternalServiceError: If mail is not configured or the SMTP server fails
        """
        owner = ensure_exists(await self.db.get(Owner, owner_id), "Owner", owner_id)
        recipient = to or owner.email
        if not recipient:
            raise ValidationError(f"Owner {owner.name} has no email address", "to")
        if not self.is_configured:
            raise ExternalServiceError("email", "Email delivery is not configured")

        report = await self.statistics.get_owner_report(owner_id, month, year)
        filename = owner_report_filename(owner_id, year, month)
        subject = f"Relatório Mensal de Propriedade - {month:02d}/{year}"
        msg = build_message(
            settings.EMAIL_FROM,
            recipient,
            subject,
            report_email_body(report),
            [(filename, render_owner_report_pdf(report), "pdf")],
        )

        try:
            await run_in_threadpool(send_message, msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Report email to {recipient} failed: {e}")
            raise ExternalServiceError("email", f"Email delivery failed: {e}") from e

        self.activities.log(
            ActivityType.REPORT_SENT,
            f"Report {month:02d}/{year} sent to {recipient}",
            owner_id,
            "owner",
        )
        await self.db.commit()
        logger.info(f"Owner report {filename} sent to {recipient}")

        return ReportEmailResult(
            sent=True, recipient=recipient, subject=subject, filename=filename
        )

"""
OCR ingestion of reservation documents.

PDFs are rasterised and read with Tesseract; images are transcribed by the AI
provider chain. The text is then handed to the chain again with an extraction
prompt, and the JSON answer is cleaned, normalised and matched against the
property catalogue.
"""

import json
import logging
import math
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional, Tuple

import pytesseract
from pdf2image import convert_from_bytes
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.core.config import settings
from app.core.exceptions import DomainException, ExternalServiceError
from app.core.string_match import match_property_names
from app.models.activity import ActivityType
from app.models.property import Property
from app.models.reservation import (
    ReservationPlatform,
    ReservationSource,
    ReservationStatus,
)
from app.schemas.ocr import (
    DocumentKind,
    ExtractedReservation,
    MultiOCRResult,
    OCRFileResult,
    OCRResult,
    OCRStatus,
    ReservationToSave,
    SaveReservationsResponse,
)
from app.schemas.reservation import ReservationCreate
from app.services.activity_service import ActivityService
from app.services.ai_providers import AIProviderChain, get_provider_chain
from app.services.property_service import PropertyService
from app.services.reservation_service import ReservationService

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
SUPPORTED_CONTENT_TYPES = (
    PDF_CONTENT_TYPE,
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/webp",
)
MAX_FILES_PER_REQUEST = 10
PDF_DPI = 300
SENTINEL = "END_OF_JSON"

IMAGE_TRANSCRIPTION_PROMPT = (
    "Extrai todo o texto desta imagem, mantendo a formatação original:"
)

PLATFORM_BY_SITE = {
    "airbnb": ReservationPlatform.AIRBNB,
    "booking": ReservationPlatform.BOOKING,
    "booking.com": ReservationPlatform.BOOKING,
    "expedia": ReservationPlatform.EXPEDIA,
    "vrbo": ReservationPlatform.EXPEDIA,
    "direct": ReservationPlatform.DIRECT,
    "direto": ReservationPlatform.DIRECT,
    "owner": ReservationPlatform.DIRECT,
}


@dataclass
class UploadedDocument:
    filename: str
    content: bytes
    content_type: str


def detect_document_type(text: str) -> DocumentKind:
    lower = text.lower()
    if "check-in" in lower or "entrada" in lower:
        return "check-in"
    if "check-out" in lower or "saída" in lower:
        return "check-out"
    if "controlo" in lower or "control" in lower:
        return "control-file"
    return "unknown"


def build_extraction_prompt(text: str, document_type: str) -> str:
    return f"""# EXTRACTOR DE RESERVAS – v4.2 (schema_version: 1.4)

Persona: És um motor de OCR + parsing ultra-fiável para reservas turísticas.
Tipo de documento detetado: {document_type}

FUNÇÃO: Receber o texto de um documento e devolver registos JSON segundo o
esquema abaixo, com consolidação, deduplicação, cálculo de confidence e
validação de campos críticos.

PARÂMETROS:
- mode = "json"
- debug = false
- confidence_threshold = 0.35

SENTINELA: Ao terminares o output escreve na última linha, isolada: {SENTINEL}

OUTPUT: Responde APENAS com array JSON válido UTF-8.

ESQUEMA (ordem fixa):
{{
  "data_entrada": "YYYY-MM-DD",
  "data_saida": "YYYY-MM-DD",
  "noites": 0,
  "nome": "",
  "hospedes": 0,
  "pais": "",
  "pais_inferido": false,
  "site": "",
  "telefone": "",
  "observacoes": "",
  "timezone_source": "",
  "id_reserva": "",
  "confidence": 0.0,
  "source_page": 0,
  "needs_review": false
}}
Se o documento indicar o alojamento, acrescenta "propriedade": "<nome>".
Se indicar o valor da reserva, acrescenta "valor_total": 0.0.

REGRAS:
- Datas DD/MM/AAAA passam a YYYY-MM-DD; noites calculadas a partir das datas se ausentes
- Hóspedes = Adultos + Crianças + Bebés
- País: rótulo direto; se vazio mas o telefone tem indicativo, preencher e pais_inferido=true
- Telefone normalizado +<indicativo> <resto>; vazio implica needs_review=true
- Site: Airbnb, Booking.com, Vrbo, Direct, Owner; senão "Outro"
- data_entrada > data_saida ou confidence < 0.35 implica needs_review=true
- Duplicados estritos eliminados; duplicados parciais fundidos com needs_review=true

TEXTO DO DOCUMENTO:
{text}

EXTRAI TODAS AS RESERVAS ENCONTRADAS:"""


def clean_json_response(response: str) -> str:
    """Strip everything around the JSON array in a model answer."""
    cleaned = response.split(SENTINEL)[0]
    cleaned = cleaned.replace("```json", "").replace("```", "")

    # Debug preamble starting with "---" before the array
    stripped = cleaned.lstrip()
    if stripped.startswith("---") and "[" in stripped:
        cleaned = stripped[stripped.index("[") :]

    start = cleaned.find("[")
    end = cleaned.rfind("]") + 1
    if start >= 0 and end > start:
        cleaned = cleaned[start:end]
    return cleaned.strip()


def parse_reservations(response: str) -> List[Dict[str, Any]]:
    cleaned = clean_json_response(response)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError:
        logger.warning(f"Could not parse extraction answer: {cleaned[:200]!r}")
        return []
    if not isinstance(data, list):
        return []
    return [item for item in data if isinstance(item, dict)]


def _to_int(value: Any, default: int) -> int:
    try:
        return int(float(value)) or default
    except (TypeError, ValueError, OverflowError):
        return default


def _to_float(value: Any, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError):
        return default
    return number if math.isfinite(number) and number else default


def _to_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes", "sim")
    return bool(value)


def _to_amount(value: Any) -> Decimal:
    try:
        amount = Decimal(str(value).replace(",", "."))
    except (InvalidOperation, ValueError, OverflowError):
        return Decimal("0")
    return amount if amount.is_finite() and amount >= 0 else Decimal("0")


def _to_optional_str(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return str(value).strip() or None


def normalize_reservations(raw: List[Dict[str, Any]]) -> List[ExtractedReservation]:
    """Fill defaults and keep only records with a guest name and both dates.

    Records the model got badly wrong are dropped one by one, so a single
    malformed entry never costs the rest of the document.
    """
    reservations = []
    for r in raw:
        nome = str(r.get("nome") or r.get("guestName") or "").strip()
        data_entrada = str(r.get("data_entrada") or r.get("checkInDate") or "").strip()
        data_saida = str(r.get("data_saida") or r.get("checkOutDate") or "").strip()
        if not (nome and data_entrada and data_saida):
            continue

        try:
            reservation = ExtractedReservation(
                data_entrada=data_entrada,
                data_saida=data_saida,
                noites=_to_int(r.get("noites"), 0),
                nome=nome,
                hospedes=_to_int(r.get("hospedes") or r.get("guestCount"), 1),
                pais=str(r.get("pais") or ""),
                pais_inferido=_to_bool(r.get("pais_inferido")),
                site=str(r.get("site") or "Outro"),
                telefone=str(r.get("telefone") or r.get("phone") or ""),
                observacoes=str(r.get("observacoes") or r.get("notes") or ""),
                timezone_source=str(r.get("timezone_source") or ""),
                id_reserva=str(r.get("id_reserva") or ""),
                confidence=_to_float(r.get("confidence"), 0.8),
                source_page=_to_int(r.get("source_page"), 1),
                needs_review=_to_bool(r.get("needs_review")),
                property_name=_to_optional_str(
                    r.get("propriedade") or r.get("propertyName") or r.get("property_name")
                ),
                total_amount=_to_amount(r.get("valor_total") or r.get("totalAmount") or 0),
                email=_to_optional_str(r.get("email")),
            )
        except PydanticValidationError as e:
            logger.warning(f"Dropped extracted reservation for {nome!r}: {e}")
            continue
        reservations.append(reservation)
    return reservations


def map_platform(site: Optional[str]) -> ReservationPlatform:
    if not site:
        return ReservationPlatform.OTHER
    return PLATFORM_BY_SITE.get(site.strip().lower(), ReservationPlatform.OTHER)


def ocr_pdf(content: bytes, languages: str) -> str:
    """Rasterise a PDF and read every page with Tesseract."""
    try:
        pages = convert_from_bytes(content, dpi=PDF_DPI)
        texts = [pytesseract.image_to_string(page, lang=languages) for page in pages]
    except Exception as exc:
        raise RuntimeError(f"PDF conversion failed: {exc}") from exc
    logger.info(f"Read {len(pages)} PDF pages with Tesseract")
    return "\n".join(texts)


class OCRService:
    def __init__(self, db: AsyncSession, provider_chain: Optional[AIProviderChain] = None):
        self.db = db
        self.provider_chain = provider_chain or get_provider_chain()
        self.activities = ActivityService(db)
        self.properties = PropertyService(db)
        self.reservations = ReservationService(db)

    def status(self) -> OCRStatus:
        configured = self.provider_chain.configured_providers
        return OCRStatus(
            status="operational" if configured else "degraded",
            configured_providers=configured,
            supported_formats=[t.split("/")[1].upper() for t in SUPPORTED_CONTENT_TYPES],
            max_file_size_mb=settings.MAX_UPLOAD_SIZE_MB,
        )

    async def extract_text(self, content: bytes, content_type: str) -> str:
        if content_type == PDF_CONTENT_TYPE:
            return await run_in_threadpool(ocr_pdf, content, settings.OCR_LANGUAGES)
        text, _ = await self.provider_chain.generate(
            IMAGE_TRANSCRIPTION_PROMPT, content, content_type
        )
        return text

    async def _property_catalogue(self) -> Tuple[List[str], List[Property]]:
        names: List[str] = []
        targets: List[Property] = []
        for db_property in await self.properties.get_name_catalogue():
            for name in [db_property.name, *(db_property.aliases or [])]:
                names.append(name)
                targets.append(db_property)
        return names, targets

    async def match_property(
        self, name: Optional[str], catalogue: Optional[Tuple[List[str], List[Property]]] = None
    ) -> Tuple[Optional[Property], Optional[float]]:
        """Best catalogue property for a name, if the match is at least medium confidence."""
        if not name:
            return None, None
        names, targets = catalogue or await self._property_catalogue()
        if not names:
            return None, None

        best = match_property_names(name, names)[0]
        if not best.result.is_medium_confidence:
            logger.info(
                f"No confident property match for {name!r} "
                f"(best {best.candidate!r}, {best.result.overall_score:.2f})"
            )
            return None, best.result.overall_score
        return targets[best.index], best.result.overall_score

    async def _attach_properties(self, reservations: List[ExtractedReservation]) -> None:
        catalogue = await self._property_catalogue()
        for reservation in reservations:
            if not reservation.property_name:
                continue
            matched, score = await self.match_property(reservation.property_name, catalogue)
            reservation.match_score = round(score, 4) if score is not None else None
            if matched is not None:
                reservation.property_id = matched.id
                reservation.property_name = matched.name

    async def process_file(self, document: UploadedDocument) -> OCRResult:
        """
        Read one document and extract its reservations.

        Raises:
            ExternalServiceError: If the AI providers cannot answer
        """
        logger.info(f"Processing {document.filename} ({document.content_type})")
        try:
            text = await self.extract_text(document.content, document.content_type)
        except RuntimeError as e:
            logger.warning(f"Text extraction failed for {document.filename}: {e}")
            return OCRResult(success=False, error=str(e))

        if not text or not text.strip():
            return OCRResult(
                success=False, error="Could not extract any text from the file"
            )

        document_type = detect_document_type(text)
        answer, provider = await self.provider_chain.generate(
            build_extraction_prompt(text, document_type)
        )
        reservations = normalize_reservations(parse_reservations(answer))
        await self._attach_properties(reservations)

        self.activities.log(
            ActivityType.PDF_PROCESSED,
            f"{document.filename} processed: {len(reservations)} reservations "
            f"({document_type})",
            None,
            "document",
        )
        await self.db.commit()

        return OCRResult(
            success=True,
            type=document_type,
            reservations=reservations,
            extracted_text=text,
            provider=provider,
        )

    async def process_multiple_files(
        self, documents: List[UploadedDocument]
    ) -> MultiOCRResult:
        all_reservations: List[ExtractedReservation] = []
        file_results: List[OCRFileResult] = []

        for document in documents:
            try:
                result = await self.process_file(document)
            except ExternalServiceError as e:
                result = OCRResult(success=False, error=e.message)

            if result.success and result.reservations:
                for reservation in result.reservations:
                    reservation.document_type = result.type
                    reservation.source_file = document.filename
                all_reservations.extend(result.reservations)
                file_results.append(
                    OCRFileResult(
                        filename=document.filename,
                        type=result.type,
                        reservations=len(result.reservations),
                        success=True,
                    )
                )
            else:
                file_results.append(
                    OCRFileResult(
                        filename=document.filename,
                        type="unknown",
                        reservations=0,
                        success=False,
                        error=result.error or "No reservations found",
                    )
                )

        return MultiOCRResult(
            success=bool(all_reservations),
            reservations=all_reservations,
            total_reservations=len(all_reservations),
            file_results=file_results,
            error=None if all_reservations else "No reservations were extracted",
        )

    async def save_reservations(
        self, items: List[ReservationToSave]
    ) -> SaveReservationsResponse:
        """Create reviewed reservations, collecting per-record failures."""
        catalogue = await self._property_catalogue()
        errors: List[str] = []
        saved = 0

        for item in items:
            label = item.guest_name or "unknown"
            property_id = item.property_id
            if property_id is None:
                matched, _ = await self.match_property(item.property_name, catalogue)
                property_id = matched.id if matched is not None else None
            if property_id is None:
                errors.append(f"{label}: Property not found")
                continue

            try:
                reservation_data = ReservationCreate(
                    property_id=property_id,
                    guest_name=item.guest_name,
                    guest_email=item.guest_email or None,
                    guest_phone=item.guest_phone or None,
                    check_in_date=item.check_in_date,
                    check_out_date=item.check_out_date,
                    num_guests=item.num_guests,
                    total_amount=item.total_amount,
                    status=ReservationStatus.CONFIRMED,
                    platform=map_platform(item.platform),
                    source=ReservationSource.OCR,
                    notes=item.notes,
                )
                await self.reservations.create(reservation_data)
                saved += 1
            except PydanticValidationError as e:
                errors.append(f"{label}: {e.errors()[0]['msg']}")
            except DomainException as e:
                errors.append(f"{label}: {e.message}")

        logger.info(f"Saved {saved} of {len(items)} OCR reservations")
        return SaveReservationsResponse(
            success=saved > 0,
            saved_count=saved,
            total_reservations=len(items),
            errors=errors,
        )


def is_supported_content_type(content_type: Optional[str]) -> bool:
    return content_type in SUPPORTED_CONTENT_TYPES

from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

DocumentKind = Literal["check-in", "check-out", "control-file", "unknown"]


class ExtractedReservation(BaseModel):
    """A reservation read from a document, before it is saved."""

    data_entrada: str = Field(..., description="Check-in date (YYYY-MM-DD)")
    data_saida: str = Field(..., description="Check-out date (YYYY-MM-DD)")
    noites: int = 0
    nome: str = Field(..., description="Guest name")
    hospedes: int = 1
    pais: str = ""
    pais_inferido: bool = False
    site: str = "Outro"
    telefone: str = ""
    observacoes: str = ""
    timezone_source: str = ""
    id_reserva: str = ""
    confidence: float = 0.8
    source_page: int = 1
    needs_review: bool = False

    property_name: Optional[str] = None
    property_id: Optional[int] = None
    match_score: Optional[float] = None
    total_amount: Decimal = Decimal("0")
    email: Optional[str] = None

    document_type: Optional[DocumentKind] = None
    source_file: Optional[str] = None


class OCRResult(BaseModel):
    success: bool
    type: DocumentKind = "unknown"
    reservations: List[ExtractedReservation] = []
    extracted_text: Optional[str] = None
    provider: Optional[str] = None
    error: Optional[str] = None


class OCRFileResult(BaseModel):
    filename: str
    type: DocumentKind
    reservations: int
    success: bool
    error: Optional[str] = None


class MultiOCRResult(BaseModel):
    success: bool
    reservations: List[ExtractedReservation]
    total_reservations: int
    file_results: List[OCRFileResult]
    error: Optional[str] = None


class ReservationToSave(BaseModel):
    """A reviewed reservation sent back by the client for saving."""

    property_id: Optional[int] = None
    property_name: Optional[str] = None
    guest_name: str = Field(..., min_length=1)
    guest_email: Optional[str] = None
    guest_phone: Optional[str] = None
    check_in_date: date
    check_out_date: date
    num_guests: int = Field(1, ge=1)
    total_amount: Decimal = Field(Decimal("0"), ge=0)
    platform: Optional[str] = None
    notes: Optional[str] = None


class SaveReservationsRequest(BaseModel):
    reservations: List[ReservationToSave]


class SaveReservationsResponse(BaseModel):
    success: bool
    saved_count: int
    total_reservations: int
    errors: List[str]


class OCRStatus(BaseModel):
    status: str
    configured_providers: List[str]
    supported_formats: List[str]
    max_file_size_mb: int

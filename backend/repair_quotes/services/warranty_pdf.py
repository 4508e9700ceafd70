import re
from datetime import date
from io import BytesIO
from typing import List, Mapping, Optional

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from ..core.config import settings
from ..schemas import ClientInfo
from ..service_types.appliance_repair import QuoteTotals, Selection

BRAND_ORANGE = (0.96, 0.45, 0.09)

PAGE_W, PAGE_H = A4
MARGIN_X = 40
HEADER_H = 56
FOOTER_H = 62
LINE_H = 20
ITEM_H = 18

EXCLUSIONS = [
    "Exclusões: mau uso, queda/instabilidade de energia, alagamento, oxidação,",
    "instalação inadequada, intervenção de terceiros, desgaste natural.",
]


def warranty_pdf_filename(client: ClientInfo, issued_on: Optional[date] = None) -> str:
    issued_on = issued_on or date.today()
    digits = re.sub(r"\D", "", client.client_phone or "")
    return f"garantia-{issued_on.isoformat()}-{digits or 'cliente'}.pdf"


class _CertificateWriter:
    """Draws lines top-down and starts a branded page when the body is full."""

    def __init__(self, c: canvas.Canvas, company: Mapping[str, str]):
        self.c = c
        self.company = company
        self.y = 0.0
        self.pages = 0

    def start_page(self) -> None:
        if self.pages:
            self.c.showPage()
        self.pages += 1
        self._header()
        self._footer()
        self.y = PAGE_H - HEADER_H - 30
        self.c.setFont("Helvetica", 11)

    def _header(self) -> None:
        c = self.c
        c.setFillColorRGB(*BRAND_ORANGE)
        c.rect(0, PAGE_H - HEADER_H, PAGE_W, HEADER_H, stroke=0, fill=1)
        c.setFillColorRGB(1, 1, 1)
        c.setFont("Helvetica-Bold", 12)
        c.drawString(MARGIN_X, PAGE_H - 34, self.company.get("name", ""))
        c.setFont("Helvetica-Bold", 14)
        c.drawRightString(PAGE_W - MARGIN_X, PAGE_H - 34, "CERTIFICADO DE GARANTIA")
        c.setFillColorRGB(0, 0, 0)

    def _footer(self) -> None:
        c = self.c
        y_line = FOOTER_H
        c.setStrokeColorRGB(*BRAND_ORANGE)
        c.setLineWidth(2)
        c.line(MARGIN_X, y_line, PAGE_W - MARGIN_X, y_line)
        c.setLineWidth(0.5)
        c.setFont("Helvetica", 9)
        c.setFillColorRGB(0.24, 0.24, 0.24)
        left = [
            f"WhatsApp: {self.company.get('whatsapp', '')}",
            f"E-mail: {self.company.get('email', '')}",
            self.company.get("address", ""),
        ]
        right = [
            f"Instagram: {self.company.get('instagram', '')}",
            f"Site: {self.company.get('site', '')}",
        ]
        fy = y_line - 14
        for line in left:
            c.drawString(MARGIN_X, fy, line)
            fy -= 12
        fy = y_line - 14
        for line in right:
            c.drawRightString(PAGE_W - MARGIN_X, fy, line)
            fy -= 12
        c.setFillColorRGB(0, 0, 0)

    def _ensure_room(self, height: float) -> None:
        if self.y - height < FOOTER_H + 20:
            self.start_page()

    def line(self, text: str, bold: bool = False, indent: float = 0, height: float = LINE_H) -> None:
        self._ensure_room(height)
        self.c.setFont("Helvetica-Bold" if bold else "Helvetica", 11)
        self.c.drawString(MARGIN_X + indent, self.y, text)
        self.y -= height

    def gap(self, height: float = 8) -> None:
        self.y -= height


def generate_warranty_pdf(
    totals: QuoteTotals,
    selection: Selection,
    client: ClientInfo,
    company: Optional[Mapping[str, str]] = None,
    issued_on: Optional[date] = None,
) -> bytes:
    """Return PDF bytes of the warranty certificate for a finished job.

    Raises ``ValueError`` without a client name or without any service.
    """
    if not (client.client_name or "").strip():
        raise ValueError("Client name is required for the warranty certificate")
    if not totals.services:
        raise ValueError("Select at least one service")

    company = company or settings.company()
    issued_on = issued_on or date.today()

    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    c.setTitle(f"Certificado de garantia - {client.client_name.strip()}")
    w = _CertificateWriter(c, company)
    w.start_page()

    w.line("Dados do Cliente", bold=True)
    w.line(f"Data: {issued_on.isoformat()}")
    w.line(f"Cliente: {client.client_name.strip()}")
    details: List[str] = []
    if client.client_phone:
        details.append(f"Telefone: {client.client_phone}")
    if client.client_address:
        details.append(f"Endereço: {client.client_address}")
    details.append(f"Tipo: {selection.equipment_type.label}")
    if client.machine_brand:
        details.append(f"Marca: {client.machine_brand}")
    if client.machine_model:
        details.append(f"Modelo: {client.machine_model}")
    for text in details:
        w.line(text)

    w.gap()
    w.line("Serviços realizados", bold=True)
    for s in totals.services:
        w.line(f"• {s.name}", indent=6, height=ITEM_H)

    if totals.parts:
        w.gap()
        w.line("Peças fornecidas/instaladas", bold=True)
        for p in totals.parts:
            w.line(f"• {p.name}", indent=6, height=ITEM_H)

    w.gap()
    w.line(f"Garantia: {totals.warranty_days} dias", bold=True)
    for text in EXCLUSIONS:
        w.line(text)

    c.showPage()
    c.save()
    buffer.seek(0)
    return buffer.read()

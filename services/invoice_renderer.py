# services/invoice_renderer.py
"""
Invoice document rendering.

Three output modes share one layout:

- preview:  vector PDF (ReportLab) served inline for on-screen viewing
- download: the same PDF served as an attachment
- raster:   pages drawn as bitmaps with Pillow, then embedded one image per
            page into a PDF; used by clients that cannot display vector PDFs

Layout: header (logo or initial avatar, company and customer blocks,
invoice metadata), item table with fixed relative column widths, summary
rows, and a footer with company contact and bank details on every page.
"""
import enum
import html
import io
import logging
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Callable, List, Optional, Sequence, Tuple

from PIL import Image, ImageDraw, ImageFont
from reportlab.lib import colors
from reportlab.lib.enums import TA_RIGHT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfgen import canvas as pdf_canvas
from reportlab.platypus import Flowable, Image as RLImage, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from schemas.document import CompanyBlock, DocumentLine, InvoiceDocument
from services.calculator import Number, to_decimal

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")

# Description, Qty, Unit price, Tax %, Amount
COLUMN_HEADERS = ("Description", "Qty", "Unit price", "Tax %", "Amount")
COLUMN_WIDTHS = (0.45, 0.10, 0.175, 0.10, 0.175)

PAGE_MARGIN = 30  # points
FOOTER_HEIGHT = 50
FOOTER_CONTACT_LINES = 3
PAGE_NUMBER_WIDTH = 60
RULE_COLOR = colors.HexColor("#f0f0f0")
HEADER_FILL = colors.HexColor("#fafafa")
AVATAR_COLOR = colors.HexColor("#1677ff")

RASTER_DPI = 150
PDF_MEDIA_TYPE = "application/pdf"


class RenderMode(str, enum.Enum):
     PREVIEW = "preview"
     DOWNLOAD = "download"
     RASTER = "raster"


@dataclass(frozen=True)
class RenderedDocument:
     content: bytes
     filename: str
     disposition: str
     media_type: str = PDF_MEDIA_TYPE
     # Letter drawn in the fallback avatar; None when the logo was used
     avatar_initial: Optional[str] = None

     @property
     def content_disposition(self) -> str:
          return f'{self.disposition}; filename="{self.filename}"'


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def format_amount(value: Number) -> str:
     """Currency display: always two decimals, half-up (10 -> '10.00', 10.005 -> '10.01')."""
     return f"{to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP):.2f}"


def format_percent(rate: Number) -> str:
     """Percentages render as whole numbers: 21 -> '21%', 7.5 -> '8%'."""
     return f"{int(to_decimal(rate).to_integral_value(rounding=ROUND_HALF_UP))}%"


def format_quantity(quantity: Number) -> str:
     return format(to_decimal(quantity).normalize(), "f")


def initial_for(name: Optional[str]) -> str:
     name = (name or "").strip()
     return name[0].upper() if name else "?"


def contact_line(company: CompanyBlock) -> str:
     address = (company.address or "").replace("\n", ", ")
     parts = [company.name, address, company.email, company.phone, company.website]
     return " | ".join(p for p in parts if p)


def bank_line(company: CompanyBlock) -> Optional[str]:
     parts = []
     if company.bank_name:
          parts.append(f"Bank: {company.bank_name}")
     if company.bank_account:
          parts.append(f"Account: {company.bank_account}")
     return "   ".join(parts) or None


def _footer_lines(company: CompanyBlock, split: Callable[[str], List[str]]) -> List[str]:
     """Contact and bank lines wrapped by the renderer's own measure."""
     lines = split(contact_line(company))[:FOOTER_CONTACT_LINES]
     bank = bank_line(company)
     if bank:
          lines.extend(split(bank)[:1])
     return lines


def _item_cells(item: DocumentLine) -> Tuple[str, str, str, str, str]:
     return (
          item.description,
          format_quantity(item.quantity),
          format_amount(item.unit_price),
          format_percent(item.tax_rate),
          format_amount(item.amount),
     )


def _summary_rows(document: InvoiceDocument) -> List[Tuple[str, str]]:
     header = document.header
     totals = document.totals
     return [
          (f"Total excl. {header.tax_label}", format_amount(totals.subtotal)),
          (f"{header.tax_label} {format_percent(header.tax_rate)}", format_amount(totals.tax_amount)),
          (f"Total amount due ({header.currency})", format_amount(totals.total)),
     ]


def _meta_lines(document: InvoiceDocument) -> List[str]:
     header = document.header
     return [
          f"Invoice number: {header.invoice_number}",
          f"Invoice date: {header.issue_date.isoformat()}",
          f"Due date: {header.due_date.isoformat()}",
          f"Currency: {header.currency}",
     ]


def _customer_lines(document: InvoiceDocument) -> List[str]:
     customer = document.customer
     lines = [customer.name]
     if customer.address:
          lines.extend(customer.address.splitlines())
     lines.extend(v for v in (customer.email, customer.phone) if v)
     return lines


# ---------------------------------------------------------------------------
# Vector PDF (ReportLab)
# ---------------------------------------------------------------------------

class AvatarFlowable(Flowable):
     """Filled circle with a single letter; stands in for a missing logo."""

     def __init__(self, letter: str, size: float = 48):
          Flowable.__init__(self)
          self.letter = letter
          self.size = size
          self.width = size
          self.height = size

     def draw(self):
          radius = self.size / 2
          self.canv.setFillColor(AVATAR_COLOR)
          self.canv.circle(radius, radius, radius, stroke=0, fill=1)
          self.canv.setFillColor(colors.white)
          self.canv.setFont("Helvetica-Bold", self.size * 0.5)
          self.canv.drawCentredString(radius, radius - self.size * 0.18, self.letter)


def _pdf_styles() -> dict:
     base = getSampleStyleSheet()
     normal = base["Normal"]
     return {
          "text": ParagraphStyle("hippo-text", parent=normal, fontSize=10, leading=14),
          "cell": ParagraphStyle("hippo-cell", parent=normal, fontSize=9, leading=12),
          "company": ParagraphStyle(
               "hippo-company", parent=normal, fontSize=20, leading=24, textColor=colors.HexColor("#333333")
          ),
          "title": ParagraphStyle("hippo-title", parent=normal, fontSize=24, leading=30, alignment=TA_RIGHT),
          "meta": ParagraphStyle("hippo-meta", parent=normal, fontSize=10, leading=14, alignment=TA_RIGHT),
     }


def _pdf_header_mark(document: InvoiceDocument, logo: Optional[bytes]) -> Tuple[Flowable, Optional[str]]:
     if logo:
          return RLImage(io.BytesIO(logo), width=120, height=60, kind="proportional", hAlign="LEFT"), None
     letter = initial_for(document.company.name)
     return AvatarFlowable(letter), letter


def _draw_pdf_footer(canvas, doc, document: InvoiceDocument) -> None:
     canvas.saveState()
     left = doc.leftMargin
     right = doc.leftMargin + doc.width
     top = PAGE_MARGIN + FOOTER_HEIGHT - 10
     canvas.setStrokeColor(RULE_COLOR)
     canvas.line(left, top, right, top)
     canvas.setFillColor(colors.HexColor("#555555"))
     canvas.setFont("Helvetica", 8)
     max_width = doc.width - PAGE_NUMBER_WIDTH
     lines = _footer_lines(document.company, lambda text: simpleSplit(text, "Helvetica", 8, max_width))
     for n, line in enumerate(lines):
          canvas.drawString(left, top - 12 - 10 * n, line)
     canvas.drawRightString(right, top - 12, f"Page {canvas.getPageNumber()}")
     canvas.restoreState()


def render_pdf(document: InvoiceDocument, logo: Optional[bytes] = None) -> Tuple[bytes, Optional[str]]:
     """
     Render the vector PDF.

     Returns:
          (pdf bytes, avatar letter or None when the logo was drawn)
     """
     buf = io.BytesIO()
     doc = SimpleDocTemplate(
          buf,
          pagesize=A4,
          leftMargin=PAGE_MARGIN,
          rightMargin=PAGE_MARGIN,
          topMargin=PAGE_MARGIN,
          bottomMargin=PAGE_MARGIN + FOOTER_HEIGHT,
          title=f"Invoice {document.header.invoice_number}",
          author=document.company.name,
          subject="Invoice",
     )
     styles = _pdf_styles()
     frame_width = doc.width

     mark, initial = _pdf_header_mark(document, logo)
     left = [mark, Spacer(1, 6), Paragraph(html.escape(document.company.name), styles["company"])]
     left.extend(Paragraph(html.escape(line), styles["text"]) for line in _customer_lines(document))
     right = [Paragraph("INVOICE", styles["title"])]
     right.extend(Paragraph(html.escape(line), styles["meta"]) for line in _meta_lines(document))

     header_table = Table([[left, right]], colWidths=[frame_width * 0.6, frame_width * 0.4])
     header_table.setStyle(TableStyle([
          ("VALIGN", (0, 0), (-1, -1), "TOP"),
          ("LEFTPADDING", (0, 0), (-1, -1), 0),
          ("RIGHTPADDING", (0, 0), (-1, -1), 0),
     ]))

     story = [header_table, Spacer(1, 14), Paragraph("Thank you for your business!", styles["text"]), Spacer(1, 10)]

     rows = [list(COLUMN_HEADERS)]
     for item in document.items:
          description, *numbers = _item_cells(item)
          rows.append([Paragraph(html.escape(description), styles["cell"]), *numbers])

     items_table = Table(rows, colWidths=[frame_width * w for w in COLUMN_WIDTHS], repeatRows=1)
     items_table.setStyle(TableStyle([
          ("BOX", (0, 0), (-1, -1), 1, RULE_COLOR),
          ("LINEBELOW", (0, 0), (-1, -1), 1, RULE_COLOR),
          ("LINEAFTER", (0, 0), (-2, -1), 1, RULE_COLOR),
          ("BACKGROUND", (0, 0), (-1, 0), HEADER_FILL),
          ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
          ("FONTSIZE", (0, 0), (-1, -1), 9),
          ("ALIGN", (1, 0), (1, -1), "CENTER"),
          ("ALIGN", (2, 0), (2, -1), "RIGHT"),
          ("ALIGN", (3, 0), (3, -1), "CENTER"),
          ("ALIGN", (4, 0), (4, -1), "RIGHT"),
          ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
          ("TOPPADDING", (0, 0), (-1, -1), 8),
          ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
     ]))
     story.append(items_table)

     summary_table = Table(
          [list(row) for row in _summary_rows(document)],
          colWidths=[frame_width * (1 - COLUMN_WIDTHS[-1]), frame_width * COLUMN_WIDTHS[-1]],
     )
     summary_table.setStyle(TableStyle([
          ("ALIGN", (0, 0), (-1, -1), "RIGHT"),
          ("FONTSIZE", (0, 0), (-1, -1), 9),
          ("LINEBELOW", (0, 0), (-1, -1), 1, RULE_COLOR),
          ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
          ("TOPPADDING", (0, 0), (-1, -1), 8),
          ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
     ]))
     story.append(summary_table)

     if document.notes:
          notes = html.escape(document.notes).replace("\n", "<br/>")
          story.extend([Spacer(1, 12), Paragraph(notes, styles["text"])])

     def on_page(canvas, doc_template):
          _draw_pdf_footer(canvas, doc_template, document)

     doc.build(story, onFirstPage=on_page, onLaterPages=on_page)
     return buf.getvalue(), initial


# ---------------------------------------------------------------------------
# Raster capture (Pillow) embedded into a PDF
# ---------------------------------------------------------------------------

def _px(points: float) -> int:
     return int(round(points * RASTER_DPI / 72))


RASTER_PAGE_SIZE = (_px(A4[0]), _px(A4[1]))


def _font(size_pt: float) -> ImageFont.FreeTypeFont:
     return ImageFont.load_default(size=_px(size_pt))


def _fit_text(draw: ImageDraw.ImageDraw, text: str, font, max_width: int) -> str:
     if draw.textlength(text, font=font) <= max_width:
          return text
     while text and draw.textlength(text + "...", font=font) > max_width:
          text = text[:-1]
     return text + "..."


def wrap_text(draw: ImageDraw.ImageDraw, text: str, font, max_width: int) -> List[str]:
     """Greedy word wrap on rendered width; words wider than a line are broken."""
     lines = []
     for paragraph in text.splitlines() or [""]:
          current = ""
          for word in paragraph.split():
               candidate = f"{current} {word}" if current else word
               if draw.textlength(candidate, font=font) <= max_width:
                    current = candidate
                    continue
               if current:
                    lines.append(current)
               while len(word) > 1 and draw.textlength(word, font=font) > max_width:
                    cut = len(word) - 1
                    while cut > 1 and draw.textlength(word[:cut], font=font) > max_width:
                         cut -= 1
                    lines.append(word[:cut])
                    word = word[cut:]
               current = word
          lines.append(current)
     return lines


class _RasterPage:
     """One bitmap page with the shared layout primitives."""

     def __init__(self, document: InvoiceDocument, number: int):
          self.document = document
          self.number = number
          self.image = Image.new("RGB", RASTER_PAGE_SIZE, "white")
          self.draw = ImageDraw.Draw(self.image)
          self.left = _px(PAGE_MARGIN)
          self.right = RASTER_PAGE_SIZE[0] - _px(PAGE_MARGIN)
          self.width = self.right - self.left
          self.footer_top = RASTER_PAGE_SIZE[1] - _px(PAGE_MARGIN + FOOTER_HEIGHT - 10)
          self.row_height = _px(24)
          self.line_height = _px(12)
          self.y = _px(PAGE_MARGIN)
          self.items_drawn = 0
          self.text_font = _font(10)
          self.cell_font = _font(9)
          self.bold_font = _font(9)

     def room(self) -> int:
          return self.footer_top - _px(6) - self.y

     def column_bounds(self) -> List[Tuple[int, int]]:
          bounds = []
          x = self.left
          for fraction in COLUMN_WIDTHS:
               w = int(self.width * fraction)
               bounds.append((x, x + w))
               x += w
          return bounds

     def text_right(self, x_right: int, y: int, text: str, font) -> None:
          self.draw.text((x_right - self.draw.textlength(text, font=font), y), text, fill="black", font=font)

     def header(self, logo: Optional[bytes]) -> Optional[str]:
          """Draw the first-page header block; returns the avatar letter if one was drawn."""
          initial = None
          top = self.y
          if logo:
               with Image.open(io.BytesIO(logo)) as mark:
                    mark = mark.convert("RGBA")
                    mark.thumbnail((_px(120), _px(60)))
                    self.image.paste(mark, (self.left, top), mark)
                    y = top + mark.height
          else:
               initial = initial_for(self.document.company.name)
               d = _px(48)
               self.draw.ellipse([self.left, top, self.left + d, top + d], fill=(22, 119, 255))
               self.draw.text(
                    (self.left + d / 2, top + d / 2), initial, fill="white", font=_font(24), anchor="mm"
               )
               y = top + d
          y += _px(6)

          column = int(self.width * 0.6)
          name_font = _font(20)
          for line in wrap_text(self.draw, self.document.company.name, name_font, column):
               self.draw.text((self.left, y), line, fill=(51, 51, 51), font=name_font)
               y += _px(24)
          y += _px(2)

          # Leave room for the greeting, the table header and one item row
          limit = self.footer_top - _px(6) - _px(38) - 2 * self.row_height
          step = _px(14)
          lines = [
               wrapped
               for line in _customer_lines(self.document)
               for wrapped in wrap_text(self.draw, line, self.text_font, column)
          ]
          fitting = max(0, (limit - y) // step)
          if len(lines) > fitting:
               logger.warning(
                    "Customer block of %s clipped to %d lines in raster mode",
                    self.document.header.invoice_number, fitting,
               )
               lines = lines[:fitting]
               if lines:
                    lines[-1] = _fit_text(self.draw, lines[-1] + "...", self.text_font, column)
          for line in lines:
               self.draw.text((self.left, y), line, fill="black", font=self.text_font)
               y += step

          ry = top
          self.text_right(self.right, ry, "INVOICE", _font(24))
          ry += _px(32)
          for line in _meta_lines(self.document):
               self.text_right(self.right, ry, line, self.text_font)
               ry += _px(14)

          self.y = max(y, ry) + _px(14)
          self.draw.text((self.left, self.y), "Thank you for your business!", fill="black", font=self.text_font)
          self.y += _px(24)
          return initial

     def wrap_cells(self, cells: Sequence[str], font) -> List[List[str]]:
          pad = _px(6)
          return [
               wrap_text(self.draw, text, font, x1 - x0 - 2 * pad)
               for (x0, x1), text in zip(self.column_bounds(), cells)
          ]

     def height_for(self, lines: int) -> int:
          return max(self.row_height, lines * self.line_height + _px(12))

     def capacity(self) -> int:
          """Cell lines of one row that still fit above the footer."""
          return max(0, (self.room() - _px(12)) // self.line_height)

     def table_header(self) -> None:
          top = self.y
          self.draw.rectangle([self.left, top, self.right, top + self.row_height], fill=(250, 250, 250))
          self.row([[text] for text in COLUMN_HEADERS], self.bold_font)

     def row(self, cells: Sequence[List[str]], font) -> None:
          top = self.y
          lines = max(len(cell) for cell in cells) or 1
          height = self.height_for(lines)
          first_y = top + (height - lines * self.line_height) // 2 + (self.line_height - _px(9)) // 2
          pad = _px(6)
          for index, ((x0, x1), cell) in enumerate(zip(self.column_bounds(), cells)):
               for n, text in enumerate(cell):
                    text_y = first_y + n * self.line_height
                    if index in (2, 4):
                         self.text_right(x1 - pad, text_y, text, font)
                    elif index in (1, 3):
                         w = self.draw.textlength(text, font=font)
                         self.draw.text(((x0 + x1 - w) / 2, text_y), text, fill="black", font=font)
                    else:
                         self.draw.text((x0 + pad, text_y), text, fill="black", font=font)
          self.draw.line([self.left, top + height, self.right, top + height], fill=(240, 240, 240), width=2)
          self.y += height

     def summary_height(self) -> int:
          return len(_summary_rows(self.document)) * self.row_height + _px(6)

     def summary(self) -> None:
          self.y += _px(6)
          amount_x0, amount_x1 = self.column_bounds()[-1]
          pad = _px(6)
          rows = _summary_rows(self.document)
          for index, (label, amount) in enumerate(rows):
               font = self.bold_font if index == len(rows) - 1 else self.cell_font
               text_y = self.y + (self.row_height - _px(9)) // 2
               self.text_right(amount_x0 - pad, text_y, label, font)
               self.text_right(amount_x1 - pad, text_y, amount, font)
               self.y += self.row_height

     def footer(self) -> None:
          top = self.footer_top
          self.draw.line([self.left, top, self.right, top], fill=(240, 240, 240), width=2)
          small = _font(8)
          max_width = self.width - _px(PAGE_NUMBER_WIDTH)
          lines = _footer_lines(self.document.company, lambda text: wrap_text(self.draw, text, small, max_width))
          for n, line in enumerate(lines):
               self.draw.text((self.left, top + _px(6 + 10 * n)), line, fill=(85, 85, 85), font=small)
          self.text_right(self.right, top + _px(6), f"Page {self.number}", small)


def rasterize_document(document: InvoiceDocument, logo: Optional[bytes] = None) -> Tuple[List[Image.Image], Optional[str]]:
     """
     Draw the document as page bitmaps.

     Item rows wrap their cells and flow onto further pages, repeating the
     table header; a row taller than a whole page is split across pages.
     The summary and notes follow the last row.

     Returns:
          (page images, avatar letter or None when the logo was drawn)
     """
     pages: List[_RasterPage] = []

     def new_page(table_header: bool) -> _RasterPage:
          page = _RasterPage(document, number=len(pages) + 1)
          pages.append(page)
          if table_header:
               page.table_header()
          return page

     page = new_page(table_header=False)
     initial = page.header(logo)
     page.table_header()

     for item in document.items:
          cells = page.wrap_cells(_item_cells(item), page.cell_font)
          while True:
               lines = max(len(cell) for cell in cells)
               if page.height_for(lines) <= page.room():
                    page.row(cells, page.cell_font)
                    page.items_drawn += 1
                    break
               if page.items_drawn:
                    page = new_page(table_header=True)
                    continue
               take = max(1, page.capacity())
               page.row([cell[:take] for cell in cells], page.cell_font)
               cells = [cell[take:] for cell in cells]
               if not any(cells):
                    page.items_drawn += 1
                    break
               page = new_page(table_header=True)

     if page.summary_height() > page.room():
          page = new_page(table_header=False)
     page.summary()

     if document.notes:
          step = _px(14)
          page.y += _px(12)
          for line in wrap_text(page.draw, document.notes, page.text_font, page.width):
               if step > page.room():
                    page = new_page(table_header=False)
               page.draw.text((page.left, page.y), line, fill="black", font=page.text_font)
               page.y += step

     for page in pages:
          page.footer()
     return [page.image for page in pages], initial


def images_to_pdf(images: Sequence[Image.Image], document: InvoiceDocument) -> bytes:
     """Embed each bitmap as a full A4 page."""
     buf = io.BytesIO()
     c = pdf_canvas.Canvas(buf, pagesize=A4)
     c.setTitle(f"Invoice {document.header.invoice_number}")
     c.setAuthor(document.company.name)
     for image in images:
          c.drawImage(ImageReader(image), 0, 0, width=A4[0], height=A4[1])
          c.showPage()
     c.save()
     return buf.getvalue()


def render_invoice(
     document: InvoiceDocument,
     mode: RenderMode = RenderMode.DOWNLOAD,
     logo: Optional[bytes] = None,
) -> RenderedDocument:
     """
     Render an invoice document in the requested mode.

     Args:
          document: the invoice document value
          mode: preview, download or raster
          logo: PNG bytes from services.logo_service.fetch_logo, or None
     """
     mode = RenderMode(mode)
     if mode is RenderMode.RASTER:
          images, initial = rasterize_document(document, logo)
          content = images_to_pdf(images, document)
     else:
          content, initial = render_pdf(document, logo)

     disposition = "inline" if mode is RenderMode.PREVIEW else "attachment"
     logger.info("Rendered %s in %s mode (%d bytes)", document.filename, mode.value, len(content))
     return RenderedDocument(
          content=content,
          filename=document.filename,
          disposition=disposition,
          avatar_initial=initial,
     )

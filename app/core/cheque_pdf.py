import io
from typing import Iterable

from app.core.amount_words import amount_in_words
from app.core.config import get_settings
from app.core.exceptions import ValidationError
from app.models.cheque import Cheque


def render_cheques_pdf(cheques: Iterable[Cheque]) -> io.BytesIO:
    """Draw one cheque per page, with a stub for the records."""
    from reportlab.lib.pagesizes import letter
    from reportlab.lib.units import inch
    from reportlab.pdfgen import canvas

    cheques = list(cheques)
    if not cheques:
        raise ValidationError("No printable cheques to render")

    settings = get_settings()
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    w, h = letter

    for cheque in cheques:
        issued = cheque.issue_date.strftime("%m/%d/%Y") if cheque.issue_date else ""

        # Header
        c.setFont("Helvetica-Bold", 16)
        c.drawString(1 * inch, h - 1 * inch, settings.ISSUER_NAME.upper())
        c.setFont("Helvetica", 10)
        c.drawRightString(w - 1 * inch, h - 1 * inch, f"Cheque #: {cheque.cheque_number}")
        c.drawRightString(w - 1 * inch, h - 1.2 * inch, f"Date: {issued}")

        # Payee and amount
        c.setFont("Helvetica", 11)
        c.drawString(1 * inch, h - 1.8 * inch, f"Pay to the order of: {cheque.client_name}")
        c.setFont("Helvetica-Bold", 14)
        c.drawRightString(w - 1 * inch, h - 1.8 * inch, f"{cheque.amount:,.2f}")
        c.setFont("Helvetica", 10)
        c.drawString(1 * inch, h - 2.2 * inch, amount_in_words(cheque.amount))

        # One signature line per required signature
        c.setFont("Helvetica", 8)
        line_w = 2.6 * inch
        for i in range(cheque.required_signatures):
            right = w - 1 * inch - i * (line_w + 0.4 * inch)
            c.line(right - line_w, h - 2.8 * inch, right, h - 2.8 * inch)
            c.drawString(right - line_w, h - 3.0 * inch, "Authorized Signature")

        # Stub
        c.line(0.5 * inch, h - 3.5 * inch, w - 0.5 * inch, h - 3.5 * inch)
        c.setFont("Helvetica-Bold", 10)
        c.drawString(1 * inch, h - 4.0 * inch, "CHEQUE STUB - RETAIN FOR YOUR RECORDS")
        c.setFont("Helvetica", 9)
        y = h - 4.4 * inch
        for label, val in [
            ("Cheque Number", cheque.cheque_number),
            ("Date", issued),
            ("Payee", cheque.client_name),
            ("Amount", f"{cheque.amount:,.2f}"),
            ("Signatures", f"{cheque.current_signatures}/{cheque.required_signatures}"),
        ]:
            c.drawString(1 * inch, y, f"{label}: {val}")
            y -= 0.2 * inch
        if cheque.remarks:
            c.drawString(1 * inch, y, f"Remarks: {cheque.remarks}")

        c.showPage()

    c.save()
    buf.seek(0)
    return buf

"""
Service per la generazione di PDF con WeasyPrint + Jinja2.
Progetto: Goldsmith Assistant (Gestionale Oreficeria)
"""

import logging
import os
from datetime import date
from typing import Any

from jinja2 import Environment, FileSystemLoader, select_autoescape

from goldsmith.core.config import settings
from goldsmith.models import ClientBill
from goldsmith.services.calculations import round_amount, round_percent, round_weight

logger = logging.getLogger(__name__)

# Path alle cartelle templates
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
TEMPLATES_DIR = os.path.join(BASE_DIR, "templates")


# Lazy import of weasyprint to avoid startup errors if Pango/GTK libraries aren't available
def _get_weasyprint():
    """Lazy import of weasyprint to handle missing system libraries gracefully."""
    try:
        from weasyprint import HTML, CSS
        return HTML, CSS
    except OSError as e:
        raise RuntimeError(
            "Dipendenze di sistema di WeasyPrint non trovate (Pango/GTK): "
            "impossibile generare il PDF"
        ) from e


def format_weight(value: Any) -> str:
    return f"{round_weight(value):.3f}"


def format_percent(value: Any) -> str:
    return f"{round_percent(value):.2f}"


def format_amount(value: Any) -> str:
    return f"{round_amount(value):.2f}"


class PdfService:
    """
    Genera il PDF di una ricevuta cliente da template HTML/CSS.

    Il rendering HTML è separato dalla conversione PDF così da poter
    essere verificato senza le librerie di sistema di WeasyPrint.
    """

    def __init__(self):
        self.env = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            autoescape=select_autoescape(["html"]),
        )
        self.env.filters["weight"] = format_weight
        self.env.filters["percent"] = format_percent
        self.env.filters["amount"] = format_amount

    def render_receipt_html(self, bill: ClientBill) -> str:
        """
        Renderizza l'HTML di una ricevuta.

        Args:
            bill: Ricevuta con articoli e totali già calcolati

        Returns:
            str: documento HTML
        """
        template = self.env.get_template("receipt_template.html")
        issue_date = bill.issue_date.strftime("%d/%m/%Y") if bill.issue_date else ""

        context = {
            # Intestazione negozio (da settings)
            "bill_title": settings.bill_title,
            "shop_header_name": settings.shop_name,
            "shop_header_address": settings.shop_address,
            "shop_header_phone": settings.shop_phone,

            # Ricevuta
            "bill": bill,
            "client_info": bill.client_info,
            "issue_date": issue_date,
            "items": bill.items or [],
            "totals": bill.totals or {},
            "oggi": date.today().strftime("%d/%m/%Y"),
        }
        return template.render(context)

    def generate_receipt_pdf(self, bill: ClientBill) -> bytes:
        """
        Genera il PDF di una ricevuta.

        Returns:
            bytes: PDF binario pronto per il download

        Raises:
            RuntimeError: Se le librerie di sistema di WeasyPrint non sono installate
        """
        # Lazy import weasyprint
        HTML, CSS = _get_weasyprint()

        html_out = self.render_receipt_html(bill)
        css = CSS(filename=os.path.join(TEMPLATES_DIR, "receipt_style.css"))

        pdf_bytes = HTML(string=html_out, base_url=TEMPLATES_DIR).write_pdf(stylesheets=[css])
        logger.info("Generato PDF ricevuta %s (%s byte)", bill.id, len(pdf_bytes))
        return pdf_bytes

"""
Report generation service module.
Builds a template context for an orphan record, renders it with Jinja2 and
converts the HTML to PDF with WeasyPrint when it is installed.
"""
from jinja2 import Environment, FileSystemLoader, select_autoescape
import logging
import os
import tempfile
from datetime import date, datetime

# Try to use WeasyPrint, else pdfkit
try:
    from weasyprint import HTML
    RENDERER = "weasy"
except Exception:
    try:
        import pdfkit
        RENDERER = "pdfkit"
    except Exception:
        RENDERER = None

from repositories.db_repository import DBService
from utils import calculate_age

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), "..", "templates")
env = Environment(loader=FileSystemLoader(TEMPLATES_DIR), autoescape=select_autoescape(["html"]))

ORGANIZATION = "Orphan Sponsorship and Relief Association"

TEMPLATE_MAP = {
    "orphan": "orphan_report.html",
    "eligible_orphans": "eligible_orphans_report.html",
}


class ReportError(Exception):
    pass


def _format_date(d):
    if not d:
        return ""
    if isinstance(d, (date, datetime)):
        return d.strftime("%Y/%m/%d")
    return str(d)


def _format_address(address):
    if address is None:
        return None
    return {
        "province": address.province.name if address.province else "",
        "city": address.city or "",
        "neighborhood": address.neighborhood or "",
        "street": address.street or "",
        "details": address.details or "",
    }


def _orphan_summary(orphan):
    return {
        "id": orphan.id,
        "osra_num": orphan.osra_num or "",
        "full_name": orphan.full_name,
        "gender": orphan.gender or "",
        "birth_date": _format_date(orphan.date_of_birth),
        "age": calculate_age(orphan.date_of_birth) if isinstance(orphan.date_of_birth, date) else None,
        "priority": orphan.priority or "",
        "status": orphan.orphan_status.name if orphan.orphan_status else "",
        "sponsorship_status": orphan.orphan_sponsorship_status.name if orphan.orphan_sponsorship_status else "",
    }


def _common_context():
    return {
        "generated_at": datetime.now().strftime("%Y/%m/%d %H:%M"),
        "organization": ORGANIZATION,
    }


def fetch_orphan_data(orphan_id: int, db_service: DBService):
    """Return the template context for a single orphan."""
    orphan = db_service.get_orphan_details(orphan_id)
    if not orphan:
        raise ReportError(f"Orphan {orphan_id} not found")

    partner = orphan.partner
    return {
        **_common_context(),
        "orphan": {
            **_orphan_summary(orphan),
            "father_name": orphan.father_name or "",
            "father_is_martyr": orphan.father_is_martyr,
            "father_date_of_death": _format_date(orphan.father_date_of_death),
            "mother_name": orphan.mother_name or "",
            "mother_alive": orphan.mother_alive,
            "contact_number": orphan.contact_number or "",
            "minor_siblings_count": orphan.minor_siblings_count,
            "sponsored_by_another_org": orphan.sponsored_by_another_org,
        },
        "partner": partner.name if partner else "",
        "original_address": _format_address(orphan.original_address),
        "current_address": _format_address(orphan.current_address),
        "sponsors": [s.name for s in orphan.sponsors],
    }


def fetch_eligible_orphans(db_service: DBService):
    """Context for the list of orphans waiting for a sponsor, high priority first."""
    orphans = db_service.load_eligible_orphans()
    orphans.sort(key=lambda o: (o.priority != "High", o.id))
    return {
        **_common_context(),
        "orphans": [_orphan_summary(o) for o in orphans],
    }


def _render_html(report_type: str, ctx: dict) -> str:
    template_name = TEMPLATE_MAP.get(report_type)
    if not template_name:
        raise ReportError(f"No template configured for report type '{report_type}'")
    tmpl = env.get_template(template_name)
    return tmpl.render(**ctx)


def generate_report(report_type: str, orphan_id: int = None, output_path: str = None, db_service: DBService = None):
    """Generate a PDF report.

    Args:
        report_type: 'orphan' | 'eligible_orphans'
        orphan_id: required for 'orphan'
        output_path: path to save the PDF. If None, the PDF bytes are returned.
        db_service: repository to read from, a fresh DBService by default.
    """
    db = db_service or DBService()
    if report_type == "orphan":
        ctx = fetch_orphan_data(orphan_id, db)
    elif report_type == "eligible_orphans":
        ctx = fetch_eligible_orphans(db)
    else:
        raise ReportError(f"Unknown report type '{report_type}'")

    html = _render_html(report_type, ctx)

    if RENDERER is None:
        raise ReportError("No PDF rendering backend available. Install weasyprint or wkhtmltopdf/pdfkit.")

    try:
        if RENDERER == "weasy":
            html_obj = HTML(string=html)
            if output_path:
                html_obj.write_pdf(output_path)
                return output_path
            return html_obj.write_pdf()

        config = None
        try:
            config = pdfkit.configuration()
        except Exception:
            logger.debug("pdfkit could not locate wkhtmltopdf, using its defaults")
        if output_path:
            pdfkit.from_string(html, output_path, configuration=config)
            return output_path
        return pdfkit.from_string(html, False, configuration=config)
    except Exception as e:
        # Save rendered HTML so the layout can be inspected in a browser
        tmp_path = os.path.join(tempfile.gettempdir(), f"report_debug_{report_type}_{orphan_id or 'all'}.html")
        try:
            with open(tmp_path, "w", encoding="utf-8") as fh:
                fh.write(html)
        except OSError as e2:
            raise ReportError(f"PDF rendering failed ({e}) and the HTML could not be saved ({e2})") from e
        logger.error("PDF rendering failed, HTML saved to %s", tmp_path)
        raise ReportError(f"PDF rendering failed: {e}. HTML saved for inspection at: {tmp_path}") from e

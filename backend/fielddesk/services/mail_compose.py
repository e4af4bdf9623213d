"""Build ``mailto:`` links for the desktop mail composer."""

from urllib.parse import quote

REPORT_MAIL = {
    "field_inspection_reports": (
        "Field Inspection Report",
        "Please find the attached Field Inspection Report.",
    ),
    "payout_reports": (
        "Payout Report",
        "Attached is the payout report.",
    ),
}


def build_mailto(to: str, subject: str, body: str) -> str:
    return f"mailto:{quote(to or '', safe='@,')}?subject={quote(subject)}&body={quote(body)}"


def report_mailto(table: str, to: str = "") -> str:
    subject, body = REPORT_MAIL[table]
    return build_mailto(to, subject, body)

from datetime import datetime
from decimal import Decimal
from io import BytesIO
from pathlib import Path

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

TABLE_STYLE = TableStyle(
    [
        ("BACKGROUND", (0, 0), (0, -1), colors.whitesmoke),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.lightgrey),
        ("FONT", (0, 0), (0, -1), "Helvetica-Bold"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]
)


def format_money(amount) -> str:
    return f"${Decimal(str(amount)):,.2f}"


def format_date(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d") if value else "-"


def _enum_value(value) -> str:
    return str(getattr(value, "value", value))


def _styles():
    styles = getSampleStyleSheet()
    styles.add(
        ParagraphStyle(
            name="TitleStyle",
            fontName="Helvetica-Bold",
            fontSize=18,
            alignment=TA_CENTER,
            spaceAfter=12,
            textColor=colors.HexColor("#1F2937"),
        )
    )
    styles.add(
        ParagraphStyle(
            name="Body",
            fontName="Helvetica",
            fontSize=11,
            leading=15,
            alignment=TA_JUSTIFY,
        )
    )
    return styles


def _build(elements, title: str) -> bytes:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=50,
        leftMargin=50,
        topMargin=50,
        bottomMargin=50,
        title=title,
        author="Rental Management",
        invariant=1,
        pageCompression=0,
    )
    doc.build(elements)
    return buffer.getvalue()


def _fields_table(rows: list[tuple[str, str]]) -> Table:
    table = Table([list(r) for r in rows], colWidths=[150, None])
    table.setStyle(TABLE_STYLE)
    return table


class ReceiptGenerator:
    @staticmethod
    def fields(payment) -> list[tuple[str, str]]:
        return [
            ("Receipt #", str(payment.id)),
            ("Payment Type", _enum_value(payment.type)),
            ("Tenant", payment.tenant_cognito_id),
            ("Lease ID", str(payment.lease_id) if payment.lease_id else "-"),
            ("Due Date", format_date(payment.due_date)),
            ("Date Paid", format_date(payment.payment_date)),
            ("Amount Due", format_money(payment.amount_due)),
            ("Amount Paid", format_money(payment.amount_paid)),
            ("Status", _enum_value(payment.payment_status)),
            ("Approved", "Yes" if payment.is_approved else "No"),
        ]

    @staticmethod
    def render(payment) -> bytes:
        styles = _styles()
        elements = [
            Paragraph("Payment Receipt", styles["TitleStyle"]),
            Spacer(1, 16),
            _fields_table(ReceiptGenerator.fields(payment)),
            Spacer(1, 20),
            Paragraph("Thank you for your payment.", styles["Body"]),
        ]
        return _build(elements, title=f"Receipt {payment.id}")

    @staticmethod
    def generate_pdf(payment, directory: str | Path) -> Path:
        base = Path(directory)
        base.mkdir(parents=True, exist_ok=True)
        file_path = base / f"receipt-{payment.id}.pdf"
        file_path.write_bytes(ReceiptGenerator.render(payment))
        return file_path


class LeaseAgreementGenerator:
    @staticmethod
    def fields(lease) -> list[tuple[str, str]]:
        prop = lease.property
        tenant = lease.tenant
        location = prop.location
        address = (
            f"{location.address}, {location.city}, {location.state} {location.postal_code}"
            if location
            else prop.name
        )
        return [
            ("Lease ID", str(lease.id)),
            ("Property", prop.name),
            ("Address", address),
            ("Manager", prop.manager_cognito_id),
            ("Tenant", f"{tenant.name} ({tenant.cognito_id})"),
            ("Start Date", format_date(lease.start_date)),
            ("End Date", format_date(lease.end_date)),
            ("Monthly Rent", format_money(lease.rent)),
            ("Security Deposit", format_money(lease.deposit)),
        ]

    @staticmethod
    def render(lease) -> bytes:
        styles = _styles()
        signatures = Table(
            [
                ["__________________________", "__________________________"],
                ["Manager Signature", "Tenant Signature"],
            ],
            colWidths=[240, 240],
        )
        elements = [
            Paragraph("Lease Agreement", styles["TitleStyle"]),
            Spacer(1, 16),
            _fields_table(LeaseAgreementGenerator.fields(lease)),
            Spacer(1, 20),
            Paragraph(
                "This Lease Agreement is entered into between the Manager and the "
                "Tenant. The Manager agrees to lease the property above to the Tenant "
                "for the term stated, at the monthly rent stated, payable in advance "
                "on the anniversary of the start date each month.",
                styles["Body"],
            ),
            Spacer(1, 48),
            signatures,
        ]
        return _build(elements, title=f"Lease Agreement {lease.id}")

    @staticmethod
    def generate_pdf(lease, directory: str | Path) -> Path:
        base = Path(directory)
        base.mkdir(parents=True, exist_ok=True)
        file_path = base / f"lease-agreement-{lease.id}.pdf"
        file_path.write_bytes(LeaseAgreementGenerator.render(lease))
        return file_path

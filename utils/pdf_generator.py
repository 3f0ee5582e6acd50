from io import BytesIO
from xml.sax.saxutils import escape
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle


class InvoicePDFGenerator:
    """Renders a stored invoice; all figures come from the invoice snapshot."""

    def __init__(self, business):
        self.business = business
        self.styles = getSampleStyleSheet()
        self.title_style = ParagraphStyle(
            'TitleStyle',
            parent=self.styles['Title'],
            fontSize=16,
            textColor=colors.navy,
            spaceAfter=12
        )

    def _business_block(self):
        business = self.business
        elements = [Paragraph(escape(business.name), self.title_style)]
        for line in (business.address, business.phone, business.email, business.website):
            if line:
                elements.append(Paragraph(escape(str(line)), self.styles['Normal']))
        if business.tax_number:
            elements.append(Paragraph(f"Tax number: {escape(business.tax_number)}", self.styles['Normal']))
        return elements

    def _customer_block(self, invoice):
        customer = invoice.customer
        elements = [Paragraph(f"Bill to: {escape(customer.name)}", self.styles['Normal'])]
        elements.append(Paragraph(f"Phone: {escape(customer.phone)}", self.styles['Normal']))
        if customer.email:
            elements.append(Paragraph(f"Email: {escape(customer.email)}", self.styles['Normal']))
        if customer.address:
            elements.append(Paragraph(f"Address: {escape(customer.address)}", self.styles['Normal']))
        return elements

    def _items_table(self, invoice):
        items_data = [['Item', 'Qty', 'Unit USD', 'Unit SDG', 'Total USD', 'Total SDG']]
        for item in invoice.items:
            items_data.append([
                item.name,
                str(item.quantity),
                f"{item.price_usd:,.2f}",
                f"{item.current_price_sdg:,.2f}",
                f"{item.total_usd:,.2f}",
                f"{item.total_current_sdg:,.2f}",
            ])

        items_data.append(['', '', '', '', 'Total USD:', f"{invoice.total_usd:,.2f}"])
        items_data.append(['', '', '', '', 'Total SDG:', f"{invoice.total_current_sdg:,.2f}"])

        table = Table(items_data, repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
            ('FONTNAME', (0, 1), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('ALIGN', (1, 0), (-1, -1), 'RIGHT'),
            ('GRID', (0, 0), (-1, -3), 0.5, colors.black),
            ('FONTNAME', (-2, -2), (-1, -1), 'Helvetica-Bold'),
        ]))
        return table

    def create_pdf(self, invoice) -> bytes:
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=48,
            leftMargin=48,
            topMargin=48,
            bottomMargin=48,
            title=f"Invoice {invoice.id}",
        )

        elements = self._business_block()
        elements.append(Spacer(1, 20))
        elements.append(Paragraph(f"INVOICE #{str(invoice.id)[:8].upper()}", self.styles['Heading1']))
        elements.append(Paragraph(
            f"Date: {invoice.date.strftime('%d %B %Y')} | Status: {invoice.status.value} | Payment: {invoice.payment_status.value}",
            self.styles['Normal'],
        ))
        elements.append(Spacer(1, 12))
        elements.extend(self._customer_block(invoice))
        elements.append(Spacer(1, 20))
        elements.append(self._items_table(invoice))

        if invoice.notes:
            elements.append(Spacer(1, 20))
            elements.append(Paragraph(f"Notes: {escape(invoice.notes)}", self.styles['Normal']))

        doc.build(elements)
        pdf_data = buffer.getvalue()
        buffer.close()
        return pdf_data

from io import BytesIO

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas


def render_certificate(cert, issuer_name):
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle(f"Certificate {cert.cert_id}")

    pdf.setFont("Helvetica-Bold", 22)
    pdf.drawCentredString(300, 800, "Certificate of Completion")

    pdf.setFont("Helvetica", 14)
    pdf.drawString(80, 750, f"Certificate ID: {cert.cert_id}")
    pdf.drawString(80, 720, f"Student: {cert.student_name} <{cert.student_email}>")
    pdf.drawString(80, 690, f"Course: {cert.course_name}")
    pdf.drawString(80, 660, f"Institution: {cert.institution_name}")
    pdf.drawString(80, 630, f"Issue Date: {cert.issue_date}")
    pdf.drawString(80, 600, f"Issuer: {issuer_name}")

    y = 570
    for label, value in (("Grade", cert.grade), ("Duration", cert.duration)):
        if value:
            pdf.drawString(80, y, f"{label}: {value}")
            y -= 30

    pdf.setFont("Courier", 9)
    pdf.drawString(80, y - 10, f"Certificate Hash: {cert.certificate_hash}")
    if cert.transaction_hash:
        pdf.drawString(80, y - 25, f"Transaction: {cert.transaction_hash}")
    if cert.ipfs_hash:
        pdf.drawString(80, y - 40, f"IPFS: {cert.ipfs_hash}")

    pdf.showPage()
    pdf.save()

    buffer.seek(0)
    return buffer

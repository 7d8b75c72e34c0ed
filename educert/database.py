from flask_sqlalchemy import SQLAlchemy
from datetime import datetime
import uuid

db = SQLAlchemy()

def uid():
    return str(uuid.uuid4())


class Issuer(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    encrypted_name = db.Column(db.LargeBinary, nullable=False)
    secret_hash = db.Column(db.String(256), nullable=False)


class AuditLog(db.Model):
    id = db.Column(db.String, primary_key=True, default=uid)
    encrypted_event = db.Column(db.LargeBinary, nullable=False)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow)


class Certificate(db.Model):
    # insertion order
    id = db.Column(db.Integer, primary_key=True)

    cert_id = db.Column(db.String(100), unique=True, nullable=False)

    student_name = db.Column(db.String(150), nullable=False)
    student_email = db.Column(db.String(255), nullable=False)
    # lookup key for case-insensitive matching
    student_email_lower = db.Column(db.String(255), nullable=False, index=True)
    course_name = db.Column(db.String(255), nullable=False)
    institution_name = db.Column(db.String(255), nullable=False)
    issue_date = db.Column(db.String(10), nullable=False)

    certificate_hash = db.Column(db.String(64), nullable=False)
    ipfs_hash = db.Column(db.String(64), nullable=False, default="")
    is_verified = db.Column(db.Boolean, nullable=False, default=True)
    transaction_hash = db.Column(db.String(66), nullable=True)

    description = db.Column(db.Text, nullable=False, default="")
    grade = db.Column(db.String(50), nullable=False, default="")
    duration = db.Column(db.String(50), nullable=False, default="")

    issued_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            "id": self.cert_id,
            "studentName": self.student_name,
            "studentEmail": self.student_email,
            "courseName": self.course_name,
            "institutionName": self.institution_name,
            "issueDate": self.issue_date,
            "certificateHash": self.certificate_hash,
            "ipfsHash": self.ipfs_hash,
            "isVerified": self.is_verified,
            "transactionHash": self.transaction_hash,
            "description": self.description,
            "grade": self.grade,
            "duration": self.duration,
            "issuedAt": self.issued_at.isoformat() if self.issued_at else None,
        }

import logging
import time
from datetime import datetime

from educert.crypto_utils import certificate_digest
from educert.database import db, Certificate
from educert.errors import ValidationFailed
from educert.ipfs import random_base36

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("student_name", "student_email", "course_name", "institution_name")
OPTIONAL_FIELDS = ("description", "grade", "duration")
SORT_KEYS = ("date", "name", "institution")
RECENT_LIMIT = 5


def new_certificate_id():
    return f"cert_{int(time.time() * 1000)}_{random_base36(9)}"


def digest_of(cert):
    return certificate_digest(cert.student_name, cert.student_email, cert.course_name,
                              cert.institution_name, cert.issue_date)


class CertificateRegistry:
    """Append-only store of issued certificates.

    Issuance validates the submitted fields, uploads attachments to the
    content store, anchors the digest on the ledger and only then persists
    the record. Lookups return None or an empty list on a miss.
    """

    def __init__(self, ledger, store):
        self.ledger = ledger
        self.store = store

    # ---------------- ISSUE ----------------
    def clean(self, data):
        fields = {}
        missing = []
        for name in REQUIRED_FIELDS:
            value = str(data.get(name) or "").strip()
            if not value:
                missing.append(name)
            fields[name] = value
        if missing:
            raise ValidationFailed("Missing required field(s): " + ", ".join(missing))
        if "@" not in fields["student_email"]:
            raise ValidationFailed("Invalid student email")

        issue_date = str(data.get("issue_date") or "").strip()
        if issue_date:
            try:
                issue_date = datetime.strptime(issue_date, "%Y-%m-%d").date().isoformat()
            except ValueError:
                raise ValidationFailed("issue_date must be YYYY-MM-DD") from None
        else:
            issue_date = datetime.utcnow().date().isoformat()
        fields["issue_date"] = issue_date

        for name in OPTIONAL_FIELDS:
            fields[name] = str(data.get(name) or "").strip()
        return fields

    def _unique_id(self):
        cert_id = new_certificate_id()
        while self.find_by_id(cert_id) is not None:
            cert_id = new_certificate_id()
        return cert_id

    def append(self, data, attachments=()):
        fields = self.clean(data)
        attachments = list(attachments)
        if attachments:
            self.store.check(attachments)

        cert_hash = certificate_digest(fields["student_name"], fields["student_email"],
                                       fields["course_name"], fields["institution_name"],
                                       fields["issue_date"])
        cert_id = self._unique_id()
        ipfs_hash = self.store.upload(attachments) if attachments else ""
        tx_hash = self.ledger.issue(cert_id, cert_hash)

        cert = Certificate(
            cert_id=cert_id,
            certificate_hash=cert_hash,
            ipfs_hash=ipfs_hash,
            is_verified=True,
            transaction_hash=tx_hash,
            student_email_lower=fields["student_email"].lower(),
            **fields
        )
        try:
            db.session.add(cert)
            db.session.commit()
        except Exception:
            db.session.rollback()
            self.ledger.discard(cert_id)
            raise

        logger.info("Issued %s to %s for %s", cert_id, fields["student_email"], fields["course_name"])
        return cert_id

    # ---------------- LOOKUP ----------------
    def find_by_id(self, cert_id):
        return Certificate.query.filter_by(cert_id=cert_id).first()

    def find_by_email(self, email):
        email = (email or "").strip().lower()
        return (Certificate.query
                .filter(Certificate.student_email_lower == email)
                .order_by(Certificate.id)
                .all())

    def all(self):
        return Certificate.query.order_by(Certificate.id).all()

    # ---------------- VERIFY ----------------
    def verify(self, cert_id):
        cert = self.find_by_id(cert_id)
        if cert is None:
            logger.info("Verification miss for %s", cert_id)
        return cert

    def check_integrity(self, cert_id):
        cert = self.find_by_id(cert_id)
        if cert is None:
            return None
        anchored = self.ledger.lookup(cert_id)
        if anchored is None:
            return "UNANCHORED"
        if cert.certificate_hash == anchored and self.ledger.verify(cert_id, digest_of(cert)):
            return "AUTHENTIC"
        logger.warning("Digest mismatch for %s", cert_id)
        return "TAMPERED"

    # ---------------- DASHBOARD ----------------
    def stats(self):
        recent = (Certificate.query
                  .order_by(Certificate.id.desc())
                  .limit(RECENT_LIMIT)
                  .all())
        return {
            "totalCertificates": Certificate.query.count(),
            "verifiedCertificates": Certificate.query.filter_by(is_verified=True).count(),
            "recentCertificates": [c.to_dict() for c in recent],
        }

    def portal_summary(self, email):
        """Counts over every certificate of a student, ignoring portal filters."""
        certs = self.find_by_email(email)
        year = str(datetime.utcnow().year)
        return {
            "total": len(certs),
            "verified": sum(1 for c in certs if c.is_verified),
            "thisYear": sum(1 for c in certs if c.issue_date[:4] == year),
            "institutions": len({c.institution_name for c in certs}),
        }

    def search(self, email, query="", sort_by="date"):
        if sort_by not in SORT_KEYS:
            raise ValidationFailed(f"sort must be one of: {', '.join(SORT_KEYS)}")
        query = (query or "").lower()
        certs = [
            c for c in self.find_by_email(email)
            if query in c.course_name.lower() or query in c.institution_name.lower()
        ]
        if sort_by == "date":
            certs.sort(key=lambda c: c.issue_date, reverse=True)
        elif sort_by == "name":
            certs.sort(key=lambda c: c.course_name.lower())
        else:
            certs.sort(key=lambda c: c.institution_name.lower())
        return certs

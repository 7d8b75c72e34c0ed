import logging

from flask import Flask, current_app, jsonify, redirect, request, send_file, url_for
from flask_cors import CORS

from educert.blockchain import Ledger
from educert.config import Config, REQUIRED_SECRETS
from educert.crypto_utils import decrypt, encrypt, get_cipher, sha256_hash
from educert.database import db, AuditLog, Issuer
from educert.errors import CertificateError, NotFound, Unauthorized, ValidationFailed
from educert.ipfs import ContentStore
from educert.pdf import render_certificate
from educert.registry import CertificateRegistry, OPTIONAL_FIELDS, REQUIRED_FIELDS

logger = logging.getLogger(__name__)

# camelCase names used by the JSON records
FIELD_ALIASES = {
    "studentName": "student_name",
    "studentEmail": "student_email",
    "courseName": "course_name",
    "institutionName": "institution_name",
    "issueDate": "issue_date",
}
ACCEPTED_FIELDS = REQUIRED_FIELDS + OPTIONAL_FIELDS + ("issue_date",)


class AppState:
    """Per-process state shared by the request handlers."""

    def __init__(self, registry, cipher):
        self.registry = registry
        self.cipher = cipher

    def issuer(self):
        return Issuer.query.first()

    def issuer_name(self):
        return decrypt(self.issuer().encrypted_name, self.cipher)

    def authorize(self, issuer_key):
        if not isinstance(issuer_key, str) or sha256_hash(issuer_key) != self.issuer().secret_hash:
            logger.warning("Rejected issuance with an invalid issuer key")
            raise Unauthorized("Unauthorized Issuer")

    def audit(self, event):
        db.session.add(AuditLog(encrypted_event=encrypt(event, self.cipher)))
        db.session.commit()


def state():
    return current_app.extensions["educert"]


# ---------------- ISSUER INIT ----------------
def ensure_issuer_exists(app, cipher):
    issuer = Issuer.query.first()
    if not issuer:
        issuer = Issuer(
            encrypted_name=encrypt(app.config["ISSUER_NAME"], cipher),
            secret_hash=sha256_hash(app.config["ISSUER_SECRET"])
        )
        db.session.add(issuer)
        db.session.commit()


def read_payload():
    payload = request.get_json(silent=True)
    if payload is None:
        payload = request.form.to_dict()
    if not isinstance(payload, dict):
        raise ValidationFailed("Expected a JSON object")
    data = {}
    for key, value in payload.items():
        name = FIELD_ALIASES.get(key, key)
        if name in ACCEPTED_FIELDS:
            data[name] = value
    return payload, data


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides:
        app.config.update(overrides)

    missing = [key for key in REQUIRED_SECRETS if not app.config.get(key)]
    if missing:
        raise RuntimeError("Missing configuration: " + ", ".join(missing))

    logging.basicConfig(
        level=app.config["LOG_LEVEL"],
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    CORS(app)
    db.init_app(app)

    cipher = get_cipher(app.config["MASTER_KEY"].encode())
    delay = app.config["NETWORK_DELAY"]
    registry = CertificateRegistry(Ledger(delay), ContentStore(delay))
    app.extensions["educert"] = AppState(registry, cipher)

    with app.app_context():
        db.create_all()
        ensure_issuer_exists(app, cipher)

    register_routes(app)
    return app


def register_routes(app):

    @app.errorhandler(CertificateError)
    def certificate_error(error):
        return jsonify({"error": error.message}), error.status_code

    # ---------------- ROUTES ----------------
    @app.route("/")
    def home():
        return redirect(url_for("dashboard"))

    @app.route("/dashboard")
    def dashboard():
        return jsonify(state().registry.stats())

    # ---------------- ISSUE ----------------
    @app.route("/issue", methods=["POST"])
    def issue():
        payload, data = read_payload()
        issuer_key = request.headers.get("X-Issuer-Key") or payload.get("issuer_key")
        state().authorize(issuer_key)

        attachments = [f.filename for f in request.files.getlist("files") if f.filename]
        if not attachments and isinstance(payload.get("attachments"), list):
            attachments = [str(name) for name in payload["attachments"]]

        registry = state().registry
        cert_id = registry.append(data, attachments)
        state().audit(f"ISSUED {cert_id}")

        return jsonify({
            "message": "Certificate Issued Successfully",
            "id": cert_id,
            "certificate": registry.find_by_id(cert_id).to_dict()
        }), 201

    # ---------------- VERIFY ----------------
    @app.route("/verify", methods=["POST"])
    def verify_form():
        payload, _ = read_payload()
        cert_id = str(payload.get("cert_id") or payload.get("certificateId") or "").strip()
        if not cert_id:
            raise ValidationFailed("Please enter a certificate ID")
        return verify(cert_id)

    @app.route("/verify/<cert_id>")
    def verify(cert_id):
        cert = state().registry.verify(cert_id)
        if cert is None:
            raise NotFound("Certificate not found or invalid")
        state().audit(f"VERIFIED {cert_id}")
        return jsonify({"result": "VERIFIED", "certificate": cert.to_dict()})

    @app.route("/integrity/<cert_id>")
    def integrity(cert_id):
        result = state().registry.check_integrity(cert_id)
        if result is None:
            raise NotFound("Certificate Not Found")
        return jsonify({"id": cert_id, "result": result})

    # ---------------- CERTIFICATE VIEW ----------------
    @app.route("/certificate/<cert_id>")
    def certificate_view(cert_id):
        cert = state().registry.find_by_id(cert_id)
        if cert is None:
            raise NotFound("Certificate Not Found")
        return jsonify({"certificate": cert.to_dict(), "issuer": state().issuer_name()})

    # ---------------- STUDENT PORTAL ----------------
    @app.route("/student/<email>")
    def student_certificates(email):
        certs = state().registry.search(
            email,
            query=request.args.get("q", ""),
            sort_by=request.args.get("sort", "date")
        )
        body = {"email": email}
        body.update(state().registry.portal_summary(email))
        body["certificates"] = [c.to_dict() for c in certs]
        return jsonify(body)

    # ---------------- PDF ----------------
    @app.route("/download/<cert_id>")
    def download_certificate(cert_id):
        cert = state().registry.find_by_id(cert_id)
        if cert is None:
            raise NotFound("Certificate Not Found")
        buffer = render_certificate(cert, state().issuer_name())
        return send_file(buffer, as_attachment=True,
                         download_name=f"{cert.cert_id}.pdf",
                         mimetype="application/pdf")

    # ---------------- EXPORT ----------------
    @app.route("/export")
    def export_certificates():
        return jsonify([c.to_dict() for c in state().registry.all()])


if __name__ == "__main__":
    app = create_app()
    app.run(port=app.config["PORT"], debug=False)

import hashlib
import base64
from cryptography.fernet import Fernet

# ---------- HASHING ----------
def sha256_hash(data: str) -> str:
    return hashlib.sha256(data.encode("utf-8")).hexdigest()

def certificate_digest(student_name: str, student_email: str, course_name: str,
                       institution_name: str, issue_date: str) -> str:
    """Fingerprint of the identifying fields of a certificate.

    Fields are concatenated without a separator, in this order.
    """
    data = f"{student_name}{student_email}{course_name}{institution_name}{issue_date}"
    return sha256_hash(data)

# ---------- SYMMETRIC ENCRYPTION ----------
def get_cipher(master_key: bytes) -> Fernet:
    key = base64.urlsafe_b64encode(hashlib.sha256(master_key).digest())
    return Fernet(key)

def encrypt(text: str, cipher: Fernet) -> bytes:
    return cipher.encrypt(text.encode("utf-8"))

def decrypt(token: bytes, cipher: Fernet) -> str:
    return cipher.decrypt(token).decode("utf-8")

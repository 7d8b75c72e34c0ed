import os

from dotenv import load_dotenv

# ---------------- LOAD SECRETS ----------------
load_dotenv()


class Config:
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///educert.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    MASTER_KEY = os.getenv("MASTER_KEY")
    ISSUER_SECRET = os.getenv("ISSUER_SECRET")
    ISSUER_NAME = os.getenv("ISSUER_NAME", "EduCert Authority")

    # seconds slept by the simulated ledger and content store
    NETWORK_DELAY = float(os.getenv("NETWORK_DELAY", "0"))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    PORT = int(os.getenv("PORT", "8080"))


REQUIRED_SECRETS = ("MASTER_KEY", "ISSUER_SECRET")

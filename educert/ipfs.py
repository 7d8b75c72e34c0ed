import logging
import os
import secrets
import string
import time

from educert.errors import ValidationFailed

logger = logging.getLogger(__name__)

MAX_FILES = 5
ALLOWED_EXTENSIONS = {"pdf", "png", "jpg", "jpeg"}
BASE36 = string.digits + string.ascii_lowercase


def random_base36(length):
    return "".join(secrets.choice(BASE36) for _ in range(length))


class ContentStore:
    """Simulated IPFS upload of certificate attachments."""

    def __init__(self, delay=0.0):
        self.delay = delay

    def check(self, filenames):
        if len(filenames) > MAX_FILES:
            raise ValidationFailed(f"At most {MAX_FILES} attachments are allowed")
        for name in filenames:
            ext = os.path.splitext(name)[1].lstrip(".").lower()
            if ext not in ALLOWED_EXTENSIONS:
                raise ValidationFailed(f"Unsupported attachment type: {name}")

    def upload(self, filenames):
        self.check(filenames)
        if self.delay:
            time.sleep(self.delay)
        ipfs_hash = f"Qm{random_base36(44)}"
        logger.info("Uploaded %d attachment(s) as %s", len(filenames), ipfs_hash)
        return ipfs_hash

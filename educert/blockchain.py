import logging
import secrets
import time

from educert.errors import LedgerError

logger = logging.getLogger(__name__)


class Ledger:
    """Simulated chain: maps certificate ids to the digest anchored at issuance."""

    def __init__(self, delay=0.0):
        self.delay = delay
        self.entries = {}

    def issue(self, cert_id, cert_hash):
        if cert_id in self.entries:
            raise LedgerError("Blockchain: Certificate already exists")
        if self.delay:
            time.sleep(self.delay)
        tx_hash = f"0x{secrets.token_hex(32)}"
        self.entries[cert_id] = {
            "hash": cert_hash,
            "transaction": tx_hash,
            "timestamp": time.time()
        }
        logger.debug("Anchored %s in transaction %s", cert_id, tx_hash)
        return tx_hash

    def lookup(self, cert_id):
        entry = self.entries.get(cert_id)
        return entry["hash"] if entry else None

    def verify(self, cert_id, cert_hash):
        if cert_id not in self.entries:
            return False
        return self.entries[cert_id]["hash"] == cert_hash

    def discard(self, cert_id):
        self.entries.pop(cert_id, None)

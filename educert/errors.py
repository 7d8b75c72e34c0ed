class CertificateError(Exception):
    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class NotFound(CertificateError):
    status_code = 404


class ValidationFailed(CertificateError):
    status_code = 400


class Unauthorized(CertificateError):
    status_code = 403


class LedgerError(CertificateError):
    status_code = 409

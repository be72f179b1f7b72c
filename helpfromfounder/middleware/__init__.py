"""HTTP middleware: request size limit, request ID, security headers.

Applied in main app; order matters (first added = outermost).
"""

from helpfromfounder.middleware.request_id import RequestIDMiddleware
from helpfromfounder.middleware.request_size_limit import RequestSizeLimitMiddleware
from helpfromfounder.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "RequestIDMiddleware",
    "RequestSizeLimitMiddleware",
    "SecurityHeadersMiddleware",
]

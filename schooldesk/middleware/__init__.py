from .request_id import RequestIDMiddleware
from .tenant import TenantAction, TenantDecision, TenantMiddleware, TenantResolver, TenantScope

__all__ = [
    "RequestIDMiddleware",
    "TenantAction",
    "TenantDecision",
    "TenantMiddleware",
    "TenantResolver",
    "TenantScope",
]

# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - clients.py: Client list, form endpoints, avatar and PDF export
# - contacts.py: Contact directory, form endpoints and PDF export
# - reports.py: Clients/contacts report as JSON, HTML and PDF
# - outcomes.py: Form/delete outcomes mapped to HTTP errors
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import clients
from . import contacts
from . import reports

__all__ = [
    "health",
    "clients",
    "contacts",
    "reports",
]

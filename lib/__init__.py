# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - supabase_client.py: Typed Supabase wrapper for database operations
# - validation.py: Record/photo validation and filename sanitizing
# - phone.py: Brazilian phone digits and input mask
# - images.py: Inline images as data: URLs for generated documents
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.supabase_client import SupabaseClient, SupabaseClientError
from lib.validation import ValidationResult, validate_client_input, validate_contact_input
from lib.phone import is_valid_phone, mask_for

__all__ = [
    # Supabase
    "SupabaseClient",
    "SupabaseClientError",
    # Validation
    "ValidationResult",
    "validate_client_input",
    "validate_contact_input",
    "is_valid_phone",
    "mask_for",
]

# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains framework-agnostic business logic:
# - models/: Pydantic schemas for data validation
# - services/: Supabase-backed CRUD, storage, report and PDF export
# - forms.py: client/contact form submit flow
# - lists.py: list screens (search, pagination, grouping, delete)
# - templates/: Jinja2 templates of the printable documents
#
# Code in this package should NOT import from FastAPI.
# This keeps the logic testable and reusable.
# =============================================================================

# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the Cadastro API:
# - test_validation.py: record/photo validation, phones, filenames
# - test_storage.py: storage keys, signed URLs, avatar resolution
# - test_services.py: client/contact table contract
# - test_forms.py / test_lists.py: form submit flow and list screens
# - test_export.py: report, HTML templates and PDF export
# - test_api.py: HTTP endpoints
#
# Run tests with: pytest
# =============================================================================

"""
Test suite for the taskboard frontend.

This package contains:
- unit/: models, API client and workflow tests with no I/O
- integration/: Flask test-client tests with the Task API mocked out
- contracts/: checks that the client matches the Task API contract file
"""

"""
Integration test package for the taskboard frontend.

Tests drive the HTML routes through the Flask test client while the
Task API is replaced by an in-memory fake, demonstrating:
- Form submission and redirect handling
- Draft persistence in the session cookie
- Flash-message feedback for every outcome
"""

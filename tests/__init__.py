"""
Test suite for the Real Estate Units API.

Run all tests: pytest
Run unit tests only: pytest tests/unit/
Run specific file: pytest tests/unit/test_unit_import_service.py -v
"""

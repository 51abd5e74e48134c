"""
Requirement Map Test Suite
==========================

Test organization:
- tests/unit/                      - Shared library tests
- tests/services/requirement_map/  - Layout engine, presentation and API tests

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Unit tests only
    pytest --cov=services          # With coverage
"""

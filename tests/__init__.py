"""
BioCO2 TSA - Test Suite
=======================

Covers:
- Gas property correlations and the Langmuir isotherm
- Every engine component and the full forward pass
- Non-finite propagation and caller contract violations
- Reporting tables, input validation and the command line

Run all tests:
    pytest tests/ -v

Run with coverage:
    pytest tests/ --cov=bioco2_tsa --cov-report=html

Run specific test file:
    pytest tests/test_engine.py -v
"""

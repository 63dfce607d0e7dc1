"""
Centralized test suite for the Shrimp Farm Management System.

Test Organization:
- integration/ - API scenario tests, one module per area
- App-specific unit tests remain in their app directories (e.g., water_quality/test_scoring.py)
"""

"""
Test Fixtures - Shared Test Data and Configurations.

This package contains reusable test fixtures:
    - sample_config.yaml: Sample configuration for testing
    - Raw upstream records in the shapes real endpoints use

Usage:
    Import fixtures in test files via pytest fixtures or direct import.
"""

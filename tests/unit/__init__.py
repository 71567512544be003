"""
Unit Tests - Testing Individual Components in Isolation.

Each component is tested in isolation with mocked dependencies.
Unit tests should be fast, deterministic, and focused.

Test Files:
    - test_codes.py / test_normalizer.py / test_formatting.py: Normalization
    - test_filter_spec.py / test_criteria.py: Filter input and criteria
    - test_screening_engine.py / test_ranking.py: Engine
    - test_kv_store.py / test_lists.py: Persistence
    - test_config_loader.py: Configuration loading/validation
"""

"""FocusFlow Test Suite

Test organization:
- unit/: Unit tests for individual modules
  - store/: SQLite and remote table stores
  - tasks/: Records, derivation, task manager, breakdown steps
  - rewards/: Streaks and achievements
  - capture/: Brain dumps
- integration/: API endpoints and the completion flow

Running tests:
    # All tests
    pytest

    # Specific package
    pytest tests/unit/rewards/

    # Skip the API tests
    pytest -m "not integration"
"""

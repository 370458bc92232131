"""
Integration tests for eventprojector.

SQL tests run against a SQLite file database through aiosqlite and are
skipped automatically when it is not installed.

Run integration tests:
    pytest tests/integration/ -v

Run only SQLite tests:
    pytest tests/integration/ -v -m sqlite

Skip integration tests:
    pytest tests/ -v -m "not integration"
"""

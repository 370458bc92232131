"""
Integration tests for SQL projections.

Tests in this package verify:
- Statements returned by handlers are executed and committed
- Failures and cancellation roll back the transaction
- SQL and plain connection handlers mixed in one projection
"""

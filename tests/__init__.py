#!/usr/bin/env python3
"""
Test suite configuration and utilities.

All tests can be run with standard Python tools:

    # Run all tests
    python -m pytest tests/ -v

    # Run only unit tests that need no database
    python -m pytest tests/ -v -m "not db"

Repository tests run against an in-memory SQLite database, so no external
service is needed. Redis and the OpenAI API are always mocked.
"""

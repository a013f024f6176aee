#!/usr/bin/env python3
"""
Test suite for the TalentMatch services.

    # Run all tests
    python -m pytest tests/ -v

    # Only the database-backed tests
    python -m pytest tests/ -v -m "db"

Database tests run against a throwaway SQLite file per test; no external
service is needed.
"""

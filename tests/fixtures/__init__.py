"""Test fixtures for the CTI event simulator.

This package provides reusable test fixtures:
- core: events, scripted steps, screen-pop data and simulators
- api: TestClient and simulator fixtures for the HTTP layer
"""

"""
Test suite for the trackit habit tracking core.

Every test injects a fixed "today"; none depend on the wall clock.
"""

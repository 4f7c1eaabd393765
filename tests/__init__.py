"""
Test suite for the promptgallery application.

Unit tests for models, services, UI handlers and CLI tasks live under
tests/unit/<area>/.
"""

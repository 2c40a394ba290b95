"""
Root conftest.py - pytest early configuration hook.
Sets environment variables BEFORE app.core.config builds the settings object.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"
os.environ["PUSH_CHANNEL_URL"] = ""


def pytest_load_initial_conftests(early_config, parser, args):
    """Runs before test modules are collected, so no app module has been imported yet."""
    os.environ["DATABASE_URL"] = "sqlite://"
    os.environ["SECRET_KEY"] = "test-secret-key"

"""Test configuration and fixtures for the identity store."""

from tests.fixtures import *  # noqa: F401,F403

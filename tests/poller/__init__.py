"""Tests for the task poller."""

"""Tests for the taskpoll library."""

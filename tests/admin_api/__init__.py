"""Tests for the admin API adapters."""

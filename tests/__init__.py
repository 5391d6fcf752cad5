"""Tests for nedots."""

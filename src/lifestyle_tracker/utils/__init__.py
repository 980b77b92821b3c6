"""Utility helpers for lifestyle-tracker."""

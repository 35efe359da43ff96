"""Reconcile declared Git tags against a GitHub repository."""

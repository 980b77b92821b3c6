"""Weekly reconciliation, history loading and favorites services."""

"""Per-user action history with time-windowed listing and retention."""

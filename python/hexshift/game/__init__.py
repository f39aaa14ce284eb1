"""Board model, movement rules and snapshots."""

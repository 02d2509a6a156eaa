"""User history snapshots: change detection before emitting usage events."""

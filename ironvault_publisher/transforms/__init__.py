"""Text transforms applied before markdown rendering."""

"""Built-in optional plugins shipped with calinterval."""

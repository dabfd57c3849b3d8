"""Iron Vault game mechanics rendering (inline ``iv-*`` code and mechanics blocks)."""

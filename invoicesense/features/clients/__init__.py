"""Client directory with per-client invoice totals and history."""

"""Revenue, client, invoice and summary reports."""

"""HTTP access to the attendance REST API."""

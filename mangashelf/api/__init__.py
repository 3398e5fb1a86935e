"""HTTP API over the shelf facade."""

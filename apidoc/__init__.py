"""API documentation crawler: javadoc sites to normalized JSON records."""

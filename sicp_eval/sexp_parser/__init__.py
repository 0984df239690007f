"""S-expression reader."""

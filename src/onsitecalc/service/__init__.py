"""HTTP service exposing the calculator."""

"""HTTP ingress."""

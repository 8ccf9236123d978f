"""convex-gen command line."""

"""convex-bindgen: typed client bindings generated from Convex backend source."""

__version__ = "0.1.0"

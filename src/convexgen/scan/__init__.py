"""Source discovery."""

from convexgen.scan.scanner import Scanner, compile_patterns, scan, scan_schema

__all__ = ["Scanner", "compile_patterns", "scan", "scan_schema"]

"""HTTP surface for driving simulator sessions."""

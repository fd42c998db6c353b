"""Quick revenue calculator: single-pass estimates from price, audience and product type."""

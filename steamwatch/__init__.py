"""Steam price history and price-drop alerts."""

"""HTTP surface for the quiz session."""

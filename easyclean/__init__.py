"""easyclean - Household cleaning tracker with time-boxed task sessions."""

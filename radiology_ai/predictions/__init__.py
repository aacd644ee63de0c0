"""Prediction result processing: ranking, severity, selection and view state."""

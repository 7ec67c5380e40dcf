"""Rules for Amazon Web Services resources."""

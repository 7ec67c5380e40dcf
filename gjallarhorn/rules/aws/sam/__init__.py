"""AWS Serverless Application Model resources."""

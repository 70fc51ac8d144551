"""
AWS Lambda entrypoints (API Gateway + SQS).
"""

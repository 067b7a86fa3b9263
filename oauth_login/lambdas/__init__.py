"""
AWS Lambda handlers for API Gateway proxy integrations

- cognito: Cognito Hosted UI redirect and callback
- google: Google consent redirect and callback with persisted users
"""

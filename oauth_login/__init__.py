"""
OAuth 2.0 / OpenID Connect authorization code login for Cognito and Google
"""

__version__ = "1.0.0"

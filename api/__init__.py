"""
API Package Initialization

FastAPI transport layer for the email brain engine: session
authentication, email, prompt and chat routes, and error mapping.
"""

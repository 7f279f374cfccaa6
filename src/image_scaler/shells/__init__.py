"""Deployment shells: persistent server and stateless invocation."""

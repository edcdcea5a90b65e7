"""
Common building blocks for the triage daemon.

This package contains reusable, domain-agnostic code:

- configuration loading (environment variables)
- bearer credential providers
- Google Tasks API client
- a small sequential polling loop
- logging configuration
"""

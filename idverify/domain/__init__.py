"""
Domain layer for the identity-verification core.

Pure business logic: name matching, verification entities, the error
taxonomy and retry policy. No network or framework dependencies.
"""

"""
Domain: Identity Verification

Entities exchanged at the provider boundary, the error taxonomy, request
validation and the retry policy applied to vendor calls.
"""

"""
Application Layer

Use cases and their contracts:
- dtos: request/result objects crossing the core's boundary
- interfaces: capability contract every vendor adapter implements
- use_cases: VerificationOrchestrator, the entry point for callers
"""

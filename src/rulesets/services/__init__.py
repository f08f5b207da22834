"""Service layer — operations returning ServiceResult for CLI adapters."""

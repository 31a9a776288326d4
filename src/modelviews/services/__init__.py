"""Service layer — operations returning ServiceResult for the CLI.

Every public service method returns a :class:`ServiceResult`; definition
errors are reported in the result, never raised to the caller.
"""

"""HR Admin package.

This package is organized by feature modules (users, employees, workflow,
offsets, biometric, ...) with a thin Flask controller layer and
service/repository layers underneath.
"""

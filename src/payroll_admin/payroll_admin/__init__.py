"""Payroll Admin package.

This package is organized by feature modules (records, cascade, ...)
with a thin Flask controller layer and service/repository layers.
"""

"""Outlet HRIS attendance package.

This package is organized by feature modules (employees, outlets, attendance,
payroll, leaves, ...) with a thin Flask controller layer and service/repository
layers underneath.
"""

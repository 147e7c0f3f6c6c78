"""Dayflow HR package.

Organized by feature modules (employees, attendance, leaves, payroll,
dashboard) with a thin Flask controller layer over service/repository layers.
"""

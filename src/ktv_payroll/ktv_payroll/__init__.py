"""KTV Payroll package.

Organized by feature modules (rules, employees, attendance, payroll, ...)
with a thin Flask controller layer over service/repository layers.
"""

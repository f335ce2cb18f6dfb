"""RFID Daily Time Record package.

This package is organized by feature modules (users, attendance, reports)
with a thin Flask controller layer and service/repository layers.
"""

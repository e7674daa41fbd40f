"""
Dental Clinic API

A FastAPI-based service for a small dental clinic: patient and professional
accounts, treatment catalog and appointment scheduling with conflict detection.
"""

__version__ = "2.0.0"

"""
Test suite for the Dental Clinic API.

Contains unit tests for the scheduling core and document store, and API tests
for authentication, users, treatments and appointments.
"""
import os

# Set environment for testing
os.environ["TESTING"] = "1"

"""
Temporal workflow for customer review sentiment triage.

Accepts a review, classifies it with AWS Comprehend, stores it under a fresh
ticket ID and notifies an SNS topic when the review is negative.
"""

__version__ = "0.1.0"

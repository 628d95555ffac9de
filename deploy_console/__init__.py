"""Deployment console: signup, deployment source selection and monitoring workflows."""

__version__ = "0.1.0"

"""Postman collection models and post-processing transforms."""

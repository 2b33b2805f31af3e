"""Convert OpenAPI specs into Postman collections and publish them."""

__version__ = "0.1.0"
